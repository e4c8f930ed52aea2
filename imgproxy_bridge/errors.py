"""
Error types shared by the signing and proxy layers.

Client errors map to a bodiless 400 and are raised before any backend call.
Upstream errors map to a 500. Configuration errors are raised while loading
options at startup and never per request.
"""


class ImgproxyBridgeError(Exception):
    status_code: int = 500


class ClientError(ImgproxyBridgeError):
    """The inbound request was rejected before reaching imgproxy."""

    status_code = 400


class InvalidSourceError(ClientError):
    pass


class BucketNotAllowedError(ClientError):
    def __init__(self, bucket: str):
        super().__init__(f"Bucket '{bucket}' is not whitelisted")
        self.bucket = bucket


class InvalidParamsError(ClientError):
    pass


class ConfigurationError(ImgproxyBridgeError):
    """Raised while building handler options from invalid configuration."""


class UpstreamError(ImgproxyBridgeError):
    """The imgproxy request failed at the transport level."""

    status_code = 500
