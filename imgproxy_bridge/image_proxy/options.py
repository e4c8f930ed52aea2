import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

import httpx

from imgproxy_bridge.errors import ConfigurationError
from imgproxy_bridge.signing import PathStyle, SigningCredential
from imgproxy_bridge.utils import token_fingerprint
from imgproxy_bridge.utils.log import LoggingOptions
from imgproxy_bridge.vars import (
    IMGPROXY_BASE_URL,
    IMGPROXY_BUCKET_WHITELIST,
    IMGPROXY_FIRST_BYTE_TIMEOUT,
    IMGPROXY_FORWARDED_HEADERS,
    IMGPROXY_KEY,
    IMGPROXY_LOG_LEVEL,
    IMGPROXY_PATH_STYLE,
    IMGPROXY_REQUEST_HEADERS,
    IMGPROXY_SALT,
    IMGPROXY_SECRET,
    IMGPROXY_VALIDATE_PARAMS,
)

logger = logging.getLogger("uvicorn.error")

# imgproxy response headers forwarded to the client unless overridden
FORWARDED_HEADERS: Tuple[str, ...] = (
    "date",
    "expires",
    "content-type",
    "content-length",
    "cache-control",
    "content-disposition",
    "content-dpr",
)


@dataclass(frozen=True)
class HandlerOptions:
    """
    Read-only configuration of the image proxy handler.

    Attributes:
        credential: Key/salt used to sign request paths, unsigned when None
        auth_token: Sent to imgproxy as ``Authorization: Bearer <token>``
        bucket_whitelist: Buckets that may be requested, unrestricted when None
        request_headers: Extra headers sent to imgproxy, applied after the bearer token
        forwarded_headers: imgproxy response headers passed to the client
        logging: Verbosity and logger used by the handler
        validate_params: Reject malformed params with a 400 instead of forwarding them
        first_byte_timeout: Seconds to wait for imgproxy's response headers, unbounded when None
        path_style: Layout of the backend request path
    """

    credential: Optional[SigningCredential] = None
    auth_token: Optional[str] = None
    bucket_whitelist: Optional[Tuple[str, ...]] = None
    request_headers: Mapping[str, str] = field(default_factory=dict)
    forwarded_headers: Tuple[str, ...] = FORWARDED_HEADERS
    logging: LoggingOptions = field(default_factory=LoggingOptions)
    validate_params: bool = True
    first_byte_timeout: Optional[float] = None
    path_style: PathStyle = PathStyle.PLAIN

    def __post_init__(self):
        # Normalize mutable inputs so the options can be shared between requests
        if self.bucket_whitelist is not None:
            object.__setattr__(self, "bucket_whitelist", tuple(self.bucket_whitelist))
        object.__setattr__(
            self, "forwarded_headers", tuple(h.lower() for h in self.forwarded_headers)
        )
        object.__setattr__(self, "request_headers", dict(self.request_headers))


def _parse_timeout(raw: str) -> Optional[float]:
    if not raw:
        return None
    try:
        timeout = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"Invalid IMGPROXY_FIRST_BYTE_TIMEOUT '{raw}'") from e
    if timeout <= 0:
        raise ConfigurationError("IMGPROXY_FIRST_BYTE_TIMEOUT must be positive")
    return timeout


def load_base_url() -> httpx.URL:
    if not IMGPROXY_BASE_URL:
        raise ConfigurationError("IMGPROXY_BASE_URL is not configured")
    url = httpx.URL(IMGPROXY_BASE_URL)
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(f"Invalid IMGPROXY_BASE_URL '{IMGPROXY_BASE_URL}'")
    return url


def load_handler_options() -> HandlerOptions:
    """
    Build handler options from the environment.

    Raises:
        ConfigurationError: if the key/salt are malformed or only one of them is set
    """
    credential = None
    if IMGPROXY_KEY or IMGPROXY_SALT:
        if not (IMGPROXY_KEY and IMGPROXY_SALT):
            raise ConfigurationError("IMGPROXY_KEY and IMGPROXY_SALT must be set together")
        credential = SigningCredential.from_hex(IMGPROXY_KEY, IMGPROXY_SALT)

    try:
        logging_options = LoggingOptions(level=IMGPROXY_LOG_LEVEL)
        path_style = PathStyle(IMGPROXY_PATH_STYLE)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    options = HandlerOptions(
        credential=credential,
        auth_token=IMGPROXY_SECRET or None,
        bucket_whitelist=IMGPROXY_BUCKET_WHITELIST,
        request_headers=IMGPROXY_REQUEST_HEADERS,
        forwarded_headers=IMGPROXY_FORWARDED_HEADERS or FORWARDED_HEADERS,
        logging=logging_options,
        validate_params=IMGPROXY_VALIDATE_PARAMS,
        first_byte_timeout=_parse_timeout(IMGPROXY_FIRST_BYTE_TIMEOUT),
        path_style=path_style,
    )
    logger.info(
        f"Loaded imgproxy options: signed={credential is not None} "
        f"auth_token={token_fingerprint(options.auth_token)} "
        f"bucket_whitelist={options.bucket_whitelist} path_style={path_style.value}"
    )
    return options
