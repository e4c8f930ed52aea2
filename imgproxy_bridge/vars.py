import os

from imgproxy_bridge.errors import ConfigurationError


def _parse_port(raw: str) -> int:
    if not raw:
        return 8000
    try:
        port = int(raw)
    except ValueError as e:
        raise ConfigurationError(f"Invalid PORT '{raw}'") from e
    if not 0 < port < 65536:
        raise ConfigurationError(f"PORT out of range: {port}")
    return port


SERVICE_NAME = os.getenv("SERVICE_NAME", "imgproxy-bridge")
HOST = os.environ.get("HOSTNAME", "0.0.0.0")
PORT = _parse_port(os.environ.get("PORT", ""))

OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT")
OTLP_HEADERS = os.getenv("OTLP_HEADERS", "")

IMGPROXY_ENDPOINT = os.environ.get("IMGPROXY_ENDPOINT", "/_next/imgproxy")
IMGPROXY_BASE_URL = os.environ.get("IMGPROXY_BASE_URL", "").rstrip("/")
IMGPROXY_KEY = os.environ.get("IMGPROXY_KEY", "")
IMGPROXY_SALT = os.environ.get("IMGPROXY_SALT", "")
# Sent to imgproxy as a bearer token
IMGPROXY_SECRET = os.environ.get("IMGPROXY_SECRET", "")
IMGPROXY_LOG_LEVEL = os.environ.get("IMGPROXY_LOG_LEVEL", "error").lower()
IMGPROXY_VALIDATE_PARAMS = (
    os.environ.get("IMGPROXY_VALIDATE_PARAMS", "true").lower() == "true"
)
IMGPROXY_FIRST_BYTE_TIMEOUT = os.environ.get("IMGPROXY_FIRST_BYTE_TIMEOUT", "")
IMGPROXY_PATH_STYLE = os.environ.get("IMGPROXY_PATH_STYLE", "plain").lower()


def _parse_list(raw: str) -> list:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _parse_header_map(raw: str) -> dict:
    mapping: dict = {}
    if not raw:
        return mapping
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        if "=" in entry:
            key, val = entry.split("=", 1)
            key = key.strip()
            val = val.strip()
            if key and val:
                mapping[key] = val
    return mapping


# Unset means no restriction, as opposed to an empty whitelist
IMGPROXY_BUCKET_WHITELIST = (
    _parse_list(os.environ["IMGPROXY_BUCKET_WHITELIST"])
    if "IMGPROXY_BUCKET_WHITELIST" in os.environ
    else None
)
IMGPROXY_FORWARDED_HEADERS = (
    _parse_list(os.environ["IMGPROXY_FORWARDED_HEADERS"])
    if "IMGPROXY_FORWARDED_HEADERS" in os.environ
    else None
)
IMGPROXY_REQUEST_HEADERS = _parse_header_map(
    os.getenv("IMGPROXY_REQUEST_HEADERS", "")
)
