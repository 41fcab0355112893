"""
Planotto - provider plumbing for the meal-planning assistant.

Core pieces shared by every assist action:
- Configuration (provider credentials, endpoints, poll bounds)
- Provider gateway: completion/vision, OCR, image generation
- Bounded polling with deadlines
"""

__version__ = "1.4.0"
