"""
Bearer token verification for learner identity.

Tokens are issued by the external identity provider; the service only checks
the signature and expiry and reads the learner id from `sub`. Token creation
is kept for development tooling and tests.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import BaseModel

from fluentpath.config import get_settings

ROLE_LEARNER = "learner"
ROLE_ADMIN = "admin"


class AccessTokenPayload(BaseModel):
    """JWT access token payload."""

    sub: str  # Learner ID
    role: str = ROLE_LEARNER
    email: Optional[str] = None
    exp: datetime
    iat: datetime
    jti: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


class JWTManager:
    """JWT token creation and verification."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        access_token_expire_minutes: Optional[int] = None,
    ):
        settings = get_settings()
        self.secret_key = secret_key or settings.secret_key
        self.algorithm = algorithm or settings.algorithm
        self.access_token_expire_minutes = (
            access_token_expire_minutes or settings.access_token_expire_minutes
        )

    def create_access_token(
        self,
        learner_id: str,
        role: str = ROLE_LEARNER,
        email: Optional[str] = None,
        expires_delta: Optional[timedelta] = None,
    ) -> tuple[str, datetime]:
        """
        Create a signed access token.

        Returns:
            Tuple of (token, expiration_datetime)
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.access_token_expire_minutes))
        payload = {
            "sub": learner_id,
            "role": role,
            "exp": expire,
            "iat": now,
            "jti": str(uuid.uuid4()),
            "type": "access",
        }
        if email:
            payload["email"] = email

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        return token, expire

    def verify_access_token(self, token: str) -> Optional[AccessTokenPayload]:
        """
        Verify and decode an access token.

        Returns:
            AccessTokenPayload if valid, None otherwise
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require_exp": True},
            )
        except JWTError:
            return None

        if payload.get("type", "access") != "access" or not payload.get("sub"):
            return None

        return AccessTokenPayload(
            sub=str(payload["sub"]),
            role=payload.get("role") or ROLE_LEARNER,
            email=payload.get("email"),
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            iat=datetime.fromtimestamp(payload.get("iat", payload["exp"]), tz=timezone.utc),
            jti=payload.get("jti") or "",
        )


# Default manager instance
_jwt_manager: Optional[JWTManager] = None


def get_jwt_manager() -> JWTManager:
    """Get or create the default JWT manager."""
    global _jwt_manager
    if _jwt_manager is None:
        _jwt_manager = JWTManager()
    return _jwt_manager


def create_access_token(
    learner_id: str,
    role: str = ROLE_LEARNER,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> tuple[str, datetime]:
    """Create an access token."""
    return get_jwt_manager().create_access_token(learner_id, role, email, expires_delta)


def verify_access_token(token: str) -> Optional[AccessTokenPayload]:
    """Verify an access token."""
    return get_jwt_manager().verify_access_token(token)
