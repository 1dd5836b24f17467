import base64
import binascii
import hashlib
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from session_auth.utils.errors import ConfigurationError, ExpiredTokenError, InvalidTokenError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
# Claim holding the session id; renaming it invalidates every issued token
LOGIN_USER_KEY = "LOGIN_USER_KEY"

pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)


def hash_password(password: str) -> str:
    if not password or not isinstance(password, str):
        raise ValueError("Password must be a non-empty string")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    if not isinstance(plain_password, str):
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def token_fingerprint(token: str) -> str:
    """Short, non-reversible label for a token, safe to write to logs."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]


@dataclass(frozen=True)
class SigningKey:
    material: bytes = field(repr=False)
    algorithm: str = ALGORITHM


def derive_signing_key(secret: Optional[str]) -> SigningKey:
    """Decode the base64 secret into HMAC key bytes."""
    if secret is None or not secret.strip():
        raise ConfigurationError("TOKEN_JWT_SECRET is not configured")
    try:
        material = base64.b64decode(secret.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ConfigurationError("TOKEN_JWT_SECRET is not valid base64") from exc
    if not material:
        raise ConfigurationError("TOKEN_JWT_SECRET decodes to an empty key")
    return SigningKey(material=material)


class SigningKeyCache:
    """Derives the signing key once and hands the same instance to every caller.

    `warm()` is called from the app factory so the key exists before the
    first request; the lock only matters for lazy callers such as the CLI
    and tests.
    """

    def __init__(self, secret: Optional[str]):
        self._secret = secret
        self._key: Optional[SigningKey] = None
        self._lock = threading.Lock()

    def get_key(self) -> SigningKey:
        key = self._key
        if key is None:
            with self._lock:
                if self._key is None:
                    self._key = derive_signing_key(self._secret)
                key = self._key
        return key

    def warm(self) -> SigningKey:
        return self.get_key()


class TokenCodec:
    """Signs session ids into compact JWTs and reads them back."""

    def __init__(self, key_cache: SigningKeyCache):
        self.key_cache = key_cache

    def encode(self, session_id: str) -> str:
        key = self.key_cache.get_key()
        claims: Dict[str, Any] = {LOGIN_USER_KEY: session_id}
        return jwt.encode(claims, key.material, algorithm=key.algorithm)

    def verify(self, token: str) -> str:
        """Return the session id carried by `token`.

        Raises:
            ExpiredTokenError: the token has an `exp` claim in the past.
            InvalidTokenError: bad signature, malformed token or missing claim.
        """
        key = self.key_cache.get_key()
        try:
            claims = jwt.decode(token, key.material, algorithms=[key.algorithm])
        except ExpiredSignatureError as exc:
            raise ExpiredTokenError("Token has expired") from exc
        except JWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        session_id = claims.get(LOGIN_USER_KEY)
        if not isinstance(session_id, str) or not session_id:
            raise InvalidTokenError(f"Token has no {LOGIN_USER_KEY} claim")
        return session_id

    def decode(self, token: Optional[str]) -> Optional[str]:
        """Session id for `token`, or None when it carries no usable session.

        Blank and "null" tokens are the anonymous case and are not logged.
        """
        if token is None or token == "null" or not token.strip():
            return None

        try:
            return self.verify(token)
        except ExpiredTokenError:
            logger.warning("Rejected expired token %s", token_fingerprint(token))
        except InvalidTokenError as exc:
            logger.warning("Rejected invalid token %s: %s", token_fingerprint(token), exc)
        return None
