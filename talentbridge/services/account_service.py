"""
Account Service - registration and login.

register: unique email, bcrypt hashed password, fixed role
login:    verify password, issue JWT {"sub": "<user id>", "role": ...}
"""

import logging
from typing import Any

from sqlalchemy import select

from talentbridge.core.auth import create_access_token, hash_password, verify_password
from talentbridge.core.config import Settings
from talentbridge.core.errors import Unauthenticated, ValidationError
from talentbridge.db.store import EntityStore
from talentbridge.db.tables import User, utcnow
from talentbridge.schemas.schemas import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from talentbridge.utils.validation import validate_payload

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, store: EntityStore, settings: Settings):
        self.store = store
        self.settings = settings

    def register(self, fields: Any) -> UserResponse:
        request = validate_payload(RegisterRequest, fields)
        email = request.email.lower()

        with self.store.session() as session:
            exists = session.scalars(select(User.id).where(User.email == email)).first()
            if exists is not None:
                raise ValidationError.single("email", "Email already registered")

            user = User(
                email=email,
                password_hash=hash_password(request.password),
                role=request.role.value,
                created_at=utcnow(),
            )
            session.add(user)
            session.flush()
            logger.info("Registered user %s as %s", user.id, user.role)
            return UserResponse.model_validate(user)

    def login(self, fields: Any) -> TokenResponse:
        request = validate_payload(LoginRequest, fields)

        with self.store.session() as session:
            user = session.scalars(select(User).where(User.email == request.email.lower())).first()

        if user is None or not verify_password(request.password, user.password_hash):
            logger.warning("Failed login for %s", request.email)
            raise Unauthenticated("Invalid credentials")

        token = create_access_token(data={"sub": str(user.id), "role": user.role}, settings=self.settings)
        return TokenResponse(access_token=token, user_id=user.id, role=user.role)
