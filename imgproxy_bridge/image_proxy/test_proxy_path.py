from urllib.parse import parse_qs, urlsplit

from imgproxy_bridge.image_proxy.proxy_path import build_proxy_image_path
from imgproxy_bridge.params import ParamBuilder


def test_default_endpoint():
    path = build_proxy_image_path("test-bucket/img.png")
    assert path == "/_next/imgproxy?src=test-bucket%2Fimg.png"


def test_with_params_format_and_width():
    params = ParamBuilder().resize(width=300).blur(2).build()
    path = build_proxy_image_path(
        "test-bucket/img.png", proxy_params=params, format="webp", width=640
    )

    parts = urlsplit(path)
    assert parts.path == "/_next/imgproxy"
    assert parse_qs(parts.query) == {
        "src": ["test-bucket/img.png"],
        "params": [params],
        "format": ["webp"],
        "width": ["640"],
    }


def test_custom_endpoint():
    assert build_proxy_image_path("b/x.png", endpoint="/images").startswith("/images?src=")
