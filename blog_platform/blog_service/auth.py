from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from fastapi import Header, Request
from typing import Optional
import jwt
import logging

from .config import Settings
from .errors import AuthError
from .schemas import Identity

logger = logging.getLogger(__name__)

# pbkdf2_sha256 ships with passlib itself, so no native bcrypt build is needed
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

TOKEN_SCHEMES = ("jwt", "bearer")


def hash_password(password: str) -> str:
    """Salted hash stored in ``users.password``; the plain text is never kept."""
    return pwd_context.hash(password)


def verify_password(candidate: str, stored_hash: str) -> bool:
    """Check a login attempt against the stored hash."""
    return pwd_context.verify(candidate, stored_hash)


class TokenService:
    """
    Issues and validates the bearer tokens handed out on signup, login and
    profile update.

    The only claim is the user id. Tokens do not expire unless
    ``expire_minutes`` is configured, and validation is purely
    cryptographic: a token for a deleted account still decodes.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: Optional[int] = None):
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(settings.JWT_SECRET, settings.JWT_ALGORITHM, settings.JWT_EXPIRE_MINUTES)

    def encode(self, user_id: str) -> str:
        payload = {"id": user_id}
        if self.expire_minutes:
            payload["exp"] = datetime.now(timezone.utc) + timedelta(minutes=self.expire_minutes)
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def header_value(self, user_id: str) -> str:
        """Token as handed to clients, ready for the Authorization header."""
        return f"JWT {self.encode(user_id)}"

    def decode(self, token: str) -> dict:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError as exc:
            raise AuthError(f"Invalid token: {exc}") from exc

    def identity_from_header(self, authorization: Optional[str]) -> Identity:
        """
        Resolve the caller from an ``Authorization: JWT <token>`` header.

        ``Bearer`` is accepted as an equivalent scheme.

        Raises:
            AuthError: If the header is missing, malformed or the token
                does not verify
        """
        if not authorization:
            raise AuthError("No auth token")
        parts = authorization.split()
        if len(parts) != 2 or parts[0].lower() not in TOKEN_SCHEMES:
            raise AuthError("Malformed authorization header")
        claims = self.decode(parts[1])
        user_id = claims.get("id")
        return Identity(id=str(user_id) if user_id else None)


def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> Identity:
    """Dependency guarding every protected route."""
    token_service: TokenService = request.app.state.token_service
    try:
        identity = token_service.identity_from_header(authorization)
    except AuthError as exc:
        logger.warning(
            "Rejected request to %s %s: %s",
            request.method, request.url.path, exc.message
        )
        raise
    request.state.identity = identity
    return identity
