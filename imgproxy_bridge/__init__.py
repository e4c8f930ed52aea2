from imgproxy_bridge.params import ParamBuilder, GravityType, ResizeType, WatermarkPosition
from imgproxy_bridge.signing import SigningCredential, build_request_path, sign
from imgproxy_bridge.image_proxy.proxy_path import IMGPROXY_ENDPOINT, build_proxy_image_path

__all__ = [
    "ParamBuilder",
    "GravityType",
    "ResizeType",
    "WatermarkPosition",
    "SigningCredential",
    "build_request_path",
    "sign",
    "IMGPROXY_ENDPOINT",
    "build_proxy_image_path",
]
