"""
Planotto Kitchen - recipe import and assist actions.

Builds on the `planotto` provider plumbing: recipe import tiers, fallback
heuristics, the /assist API and the CLI.
"""
