"""
Planotto Kitchen - Configuration and settings.

KitchenSettings extends CoreSettings with recipe-import limits and the
fallback image settings.
"""

from functools import lru_cache

from planotto.config import CoreSettings


class KitchenSettings(CoreSettings):
    """
    Kitchen application settings.

    Extends CoreSettings with import limits and assist defaults.
    """

    # Photo import
    import_max_photos: int = 5  # pages actually sent to providers
    ocr_language: str = "en"
    ocr_text_max_chars: int = 14000
    known_products_limit: int = 200

    # URL import: fetch the page and pass its Schema.org recipe as context
    import_fetch_pages: bool = True
    page_fetch_timeout_seconds: float = 15.0

    # Overall budget for one import request (seconds, 0 = unlimited)
    import_deadline_seconds: float = 0

    # Placeholder image service used when image generation is unavailable
    placeholder_image_base_url: str = "https://loremflickr.com"


@lru_cache
def get_settings() -> KitchenSettings:
    """Get cached settings instance."""
    return KitchenSettings()
