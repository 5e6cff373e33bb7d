"""Password hashing and bearer-token (JWT) minting and verification."""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import bcrypt
import jwt

from docvault.core.errors import TokenProcessingError

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 1
PASSWORD_MAX_LEN = 128

BEARER_PREFIX = "Bearer "


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def extract_bearer(header: str | None) -> str | None:
    """Return the token of an 'Authorization: Bearer <token>' value, else None. Prefix is case-sensitive."""
    if not header or not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):]
    return token or None


class TokenCodec:
    """
    Mints and verifies HS256 bearer tokens binding a username (sub) to an expiry (exp).

    Time is passed in explicitly (timezone-aware datetimes); when omitted the
    current UTC time is used. No clock-skew leeway is applied.
    """

    def __init__(self, secret: str, ttl: timedelta, algorithm: str = "HS256") -> None:
        self._secret = secret
        self.ttl = ttl
        self.algorithm = algorithm

    def mint(self, username: str, now: datetime | None = None) -> str:
        """
        Create a signed token with sub=username, iat=now and exp=now+ttl.
        A random jti keeps tokens minted in the same second distinct.
        """
        issued = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": username,
            "iat": int(issued.timestamp()),
            "exp": int((issued + self.ttl).timestamp()),
            "jti": uuid4().hex,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def _decode(self, token: str, now: datetime | None) -> dict[str, Any]:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "exp"],
                },
            )
        except jwt.PyJWTError as e:
            raise TokenProcessingError(str(e) or type(e).__name__) from e
        exp = payload.get("exp")
        if not isinstance(exp, int | float):
            raise TokenProcessingError("Expiration Time claim (exp) must be a number")
        current = (now or datetime.now(UTC)).timestamp()
        if exp <= current:
            raise TokenProcessingError("Signature has expired")
        return payload

    def subject_of(self, token: str, now: datetime | None = None) -> str:
        """
        Return the username (sub) of a token.
        Raises TokenProcessingError on malformed, badly signed or expired tokens.
        """
        payload = self._decode(token, now)
        sub = payload.get("sub")
        if not isinstance(sub, str) or not sub:
            raise TokenProcessingError("Subject claim (sub) must be a non-empty string")
        return sub

    def is_structurally_valid(
        self, token: str, expected_username: str, now: datetime | None = None
    ) -> bool:
        """True iff the signature verifies, sub equals expected_username and exp is in the future."""
        try:
            payload = self._decode(token, now)
        except TokenProcessingError:
            return False
        return payload.get("sub") == expected_username
