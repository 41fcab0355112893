"""Provider gateway: HTTP clients for OCR and image generation, plus the shared result type."""

from .image_gen import ImageGenClient
from .ocr import OcrClient
from .result import ErrorKind, ProviderResult, USER_MESSAGES, error_kind_for_status

__all__ = [
    "ErrorKind",
    "ImageGenClient",
    "OcrClient",
    "ProviderResult",
    "USER_MESSAGES",
    "error_kind_for_status",
]
