"""Inline images as data URIs."""

from .config import AppConfig, load_config
from .core import ConversionService
from .datauri import encode_image, to_data_uri
from .detection import MediaType, sniff_media_type
from .errors import ConversionError
from .models import HtmlConversionResult

__all__ = [
    "AppConfig",
    "ConversionError",
    "ConversionService",
    "HtmlConversionResult",
    "MediaType",
    "encode_image",
    "load_config",
    "sniff_media_type",
    "to_data_uri",
]
