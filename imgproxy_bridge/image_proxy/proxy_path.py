from typing import Optional
from urllib.parse import urlencode

from imgproxy_bridge.vars import IMGPROXY_ENDPOINT


def build_proxy_image_path(
    file: str,
    proxy_params: Optional[str] = None,
    endpoint: Optional[str] = None,
    format: Optional[str] = None,
    width: Optional[int] = None,
) -> str:
    """
    Build the client-facing URL of an image served through the proxy endpoint.

    ``width`` is not used by the handler. It is only there for responsive image
    loaders that require a width-bearing query parameter.
    """
    query = [("src", file)]
    if proxy_params:
        query.append(("params", proxy_params))
    if format:
        query.append(("format", format))
    if width:
        query.append(("width", str(width)))

    return f"{endpoint or IMGPROXY_ENDPOINT}?{urlencode(query)}"
