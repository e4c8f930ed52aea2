import hashlib
from typing import Optional


def mask_secret(text: str, secret: Optional[str]) -> str:
    """Replace every occurrence of ``secret`` in ``text`` with its first 4 chars."""
    return text.replace(secret, f"{secret[:4]}****") if secret else text


def token_fingerprint(token: Optional[str]) -> str:
    """Provide a stable, low-leak token identifier for logs."""
    if not token:
        return "<empty>"
    digest = hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]
    return f"len={len(token)} sha256={digest}"
