import base64
import hashlib
import hmac

import pytest

from imgproxy_bridge.errors import ConfigurationError
from imgproxy_bridge.signing import SigningCredential, sign

KEY = "943b421c9eb07c830af81030552c86009268de4e532ba2ee2eab8247c6da0881"
SALT = "520f986b998545b4785e0defbc4f3c1203f22de2374a3d53cb7a7fe9fea309c5"
PATH = "/rs:fill:300:400:0/g:sm/plain/s3://bucket/image.png"


def _reference_signature(key_hex, salt_hex, message):
    digest = hmac.new(
        bytes.fromhex(key_hex),
        bytes.fromhex(salt_hex) + message.encode(),
        hashlib.sha256,
    ).digest()
    return base64.urlsafe_b64encode(digest).decode().rstrip("=")


def test_matches_hmac_sha256_over_salt_and_message():
    assert sign(KEY, SALT, PATH) == _reference_signature(KEY, SALT, PATH)


def test_is_unpadded_and_url_safe():
    signature = sign(KEY, SALT, PATH)
    assert len(signature) == 43
    assert not set(signature) & {"=", "+", "/"}


def test_is_deterministic():
    assert sign(KEY, SALT, PATH) == sign(KEY, SALT, PATH)


def test_accepts_bytes_message():
    assert sign(KEY, SALT, PATH.encode()) == sign(KEY, SALT, PATH)


@pytest.mark.parametrize(
    "key, salt, message",
    [
        ("00" + KEY[2:], SALT, PATH),
        (KEY, "00" + SALT[2:], PATH),
        (KEY, SALT, PATH + "x"),
    ],
)
def test_changes_with_any_input(key, salt, message):
    assert sign(key, salt, message) != sign(KEY, SALT, PATH)


@pytest.mark.parametrize("key, salt", [("zz", SALT), (KEY, "abc"), (KEY, "not hex")])
def test_malformed_hex_is_a_configuration_error(key, salt):
    with pytest.raises(ConfigurationError):
        sign(key, salt, PATH)


class TestSigningCredential:
    def test_signs_like_sign(self):
        credential = SigningCredential.from_hex(KEY, SALT)
        assert credential.sign(PATH) == sign(KEY, SALT, PATH)

    def test_rejects_malformed_hex(self):
        with pytest.raises(ConfigurationError):
            SigningCredential.from_hex("xyz", SALT)

    def test_repr_hides_secrets(self):
        credential = SigningCredential.from_hex(KEY, SALT)
        assert KEY not in repr(credential)
        assert "redacted" in repr(credential)

    def test_is_immutable(self):
        credential = SigningCredential.from_hex(KEY, SALT)
        with pytest.raises(Exception):
            credential.key = b"other"
