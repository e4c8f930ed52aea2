from .signer import SigningCredential, sign
from .request_path import PathStyle, build_request_path

__all__ = ["SigningCredential", "sign", "PathStyle", "build_request_path"]
