"""HMAC-SHA256 signatures for imgproxy request paths."""

import base64
import hashlib
import hmac
from dataclasses import dataclass
from typing import Union

from imgproxy_bridge.errors import ConfigurationError


def _decode_hex(value: str, name: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"imgproxy {name} is not valid hex: {e}") from e


def _to_bytes(message: Union[str, bytes]) -> bytes:
    return message.encode("utf-8") if isinstance(message, str) else message


def _digest(key: bytes, salt: bytes, message: bytes) -> str:
    digest = hmac.new(key, salt + message, hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def sign(key: str, salt: str, message: Union[str, bytes]) -> str:
    """
    Sign ``message`` the way imgproxy verifies it.

    Args:
        key: Hex-encoded key (IMGPROXY_KEY)
        salt: Hex-encoded salt (IMGPROXY_SALT)
        message: The unsigned request path

    Returns:
        URL-safe base64 of HMAC-SHA256(key, salt + message), without padding
    """
    return _digest(_decode_hex(key, "key"), _decode_hex(salt, "salt"), _to_bytes(message))


@dataclass(frozen=True)
class SigningCredential:
    """Decoded key/salt pair, built once from configuration."""

    key: bytes
    salt: bytes

    @classmethod
    def from_hex(cls, key: str, salt: str) -> "SigningCredential":
        return cls(key=_decode_hex(key, "key"), salt=_decode_hex(salt, "salt"))

    def sign(self, message: Union[str, bytes]) -> str:
        return _digest(self.key, self.salt, _to_bytes(message))

    def __repr__(self) -> str:
        return "SigningCredential(key=<redacted>, salt=<redacted>)"
