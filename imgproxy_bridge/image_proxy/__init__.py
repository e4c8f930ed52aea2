from .handler import handle, is_valid_locator, parse_bucket
from .options import FORWARDED_HEADERS, HandlerOptions, load_base_url, load_handler_options
from .proxy_path import build_proxy_image_path

__all__ = [
    "handle",
    "is_valid_locator",
    "parse_bucket",
    "FORWARDED_HEADERS",
    "HandlerOptions",
    "load_base_url",
    "load_handler_options",
    "build_proxy_image_path",
]
