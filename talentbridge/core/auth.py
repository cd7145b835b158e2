"""
Authentication Utility - JWT, password hashing and the access control gate.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- AccessGate: bearer token -> Identity(user_id, role), plus role checks
- FastAPI dependencies for protected routes
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from talentbridge.core.config import Settings
from talentbridge.core.errors import Forbidden, Unauthenticated
from talentbridge.db.store import EntityStore
from talentbridge.db.tables import User
from talentbridge.models.domain import Identity, Role

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor; a missing header is reported by the gate, not FastAPI
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


class AccessGate:
    """
    Resolves credentials before a request reaches domain logic.

    The role is read from the user row, so a token minted before a role
    change cannot be used to act under the old role.
    """

    def __init__(self, store: EntityStore, settings: Settings):
        self.store = store
        self.settings = settings

    def resolve(self, token: Optional[str]) -> Identity:
        if not token:
            raise Unauthenticated()

        payload = decode_token(token, self.settings)
        if not payload:
            raise Unauthenticated("Token is not valid")

        try:
            user_id = int(payload.get("sub"))
        except (TypeError, ValueError):
            raise Unauthenticated("Token is not valid")

        with self.store.session() as session:
            user = session.get(User, user_id)
            if user is None:
                raise Unauthenticated("Token is not valid")
            return Identity(user_id=user.id, role=Role(user.role))

    @staticmethod
    def authorize(identity: Identity, *roles: Role) -> Identity:
        if identity.role not in roles:
            logger.warning("User %s (%s) denied; requires %s",
                           identity.user_id, identity.role.value, "/".join(r.value for r in roles))
            raise Forbidden(f"User role {identity.role.value} is not authorized to access this route")
        return identity


def get_gate(request: Request) -> AccessGate:
    return request.app.state.gate


async def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    gate: AccessGate = Depends(get_gate),
) -> Identity:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @router.get("/protected")
        async def route(identity: Identity = Depends(get_identity)):
            return identity
    """
    return gate.resolve(credentials.credentials if credentials else None)


def require_role(*roles: Role):
    """Dependency factory - require one of ``roles``."""

    async def dependency(identity: Identity = Depends(get_identity)) -> Identity:
        return AccessGate.authorize(identity, *roles)

    return dependency
