"""
Identity - bearer token verification for learners supplied by the identity provider.
"""

from fluentpath.kernel.identity.jwt import (
    ROLE_ADMIN,
    ROLE_LEARNER,
    AccessTokenPayload,
    JWTManager,
    create_access_token,
    verify_access_token,
)

__all__ = [
    "ROLE_ADMIN",
    "ROLE_LEARNER",
    "AccessTokenPayload",
    "JWTManager",
    "create_access_token",
    "verify_access_token",
]
