from enum import Enum
from typing import Optional
from urllib.parse import quote

from .signer import SigningCredential

# Characters left as-is in the storage locator; anything else is percent-escaped
# so the signed path and the path on the wire are identical.
_LOCATOR_SAFE_CHARS = "/-._~!$&'()*+,;=:"


class PathStyle(str, Enum):
    PLAIN = "plain"
    LEGACY = "legacy"


def build_request_path(
    locator: str,
    params: Optional[str] = None,
    format: Optional[str] = None,
    credential: Optional[SigningCredential] = None,
    path_style: PathStyle = PathStyle.PLAIN,
) -> str:
    """
    Build the imgproxy request path for an S3 object.

    The plain style renders ``/<signature>/<params>/plain/s3://<locator>[@<format>]``.
    Without a credential the signature segment is left empty, which imgproxy
    accepts when signing is disabled. The legacy style renders the unsigned
    ``/<params>/s3://<locator>`` form and ignores the credential.
    """
    source = f"s3://{quote(locator, safe=_LOCATOR_SAFE_CHARS)}"

    if path_style == PathStyle.LEGACY:
        return f"/{params}/{source}" if params else f"/{source}"

    unsigned_path = f"/{params}/" if params else "/"
    unsigned_path += f"plain/{source}"
    if format:
        unsigned_path += f"@{format}"

    signature = credential.sign(unsigned_path) if credential else ""
    return f"/{signature}{unsigned_path}"
