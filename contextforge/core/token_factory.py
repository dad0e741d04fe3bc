"""Pure functions for creating and decoding HS256 bearer tokens.

No classes with state, just encode/decode. Used by the auth dependency and by
tests or scripts that need a token for a given user.
"""

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

TOKEN_ISSUER = "contextforge"


@dataclass(frozen=True)
class TokenPayload:
    """Decoded token claims. Immutable."""
    sub: str
    role: str
    exp: datetime


def create_token(
    subject: str,
    secret: str,
    role: str = "user",
    algorithm: str = "HS256",
    expires_hours: int = 24,
) -> str:
    """Create a signed JWT.

    Args:
        subject: The user id the token acts for.
        secret: HMAC signing key.
        role: Role claim.
        algorithm: Only HS256 supported.
        expires_hours: Hours until expiry; negative values produce an expired token.
    """
    if algorithm != "HS256":
        raise ValueError(f"Unsupported algorithm: {algorithm}")

    now = int(time.time())
    claims = {
        "sub": subject,
        "role": role,
        "iat": now,
        "exp": now + expires_hours * 3600,
        "iss": TOKEN_ISSUER,
    }
    header = {"alg": "HS256", "typ": "JWT"}

    signing_input = _b64encode(_dumps(header)) + b"." + _b64encode(_dumps(claims))
    signature = _sign(secret, signing_input)
    return (signing_input + b"." + _b64encode(signature)).decode()


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> Optional[TokenPayload]:
    """Validate signature, issuer and expiry.

    Returns ``None`` on any failure (bad signature, wrong issuer, expired,
    malformed); callers decide what absence means.
    """
    if algorithm != "HS256":
        return None
    try:
        header_b64, claims_b64, signature_b64 = token.encode().split(b".")
    except ValueError:
        return None

    try:
        expected = _sign(secret, header_b64 + b"." + claims_b64)
        if not hmac.compare_digest(expected, _b64decode(signature_b64)):
            return None

        claims = json.loads(_b64decode(claims_b64))
        if claims.get("iss") != TOKEN_ISSUER:
            return None

        exp = int(claims.get("exp", 0))
        if time.time() > exp:
            return None

        subject = claims.get("sub")
        if not subject:
            return None

        return TokenPayload(
            sub=subject,
            role=claims.get("role", "user"),
            exp=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
    except (json.JSONDecodeError, ValueError, TypeError, AttributeError):
        return None


def _dumps(obj: dict) -> bytes:
    return json.dumps(obj, separators=(",", ":")).encode()


def _sign(secret: str, signing_input: bytes) -> bytes:
    return hmac.new(secret.encode(), signing_input, hashlib.sha256).digest()


def _b64encode(data: bytes) -> bytes:
    return base64.urlsafe_b64encode(data).rstrip(b"=")


def _b64decode(data: bytes) -> bytes:
    return base64.urlsafe_b64decode(data + b"=" * (-len(data) % 4))
