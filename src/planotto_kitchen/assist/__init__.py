"""Assist actions: AI hints with provider-free fallbacks."""
