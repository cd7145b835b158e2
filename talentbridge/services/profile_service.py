"""
Profile Service

One profile per user, shaped by the user's role:
- student  -> students table, StudentProfile
- school   -> schools table, SchoolProfile
- employer -> employers table, EmployerProfile

upsert_profile creates the profile on first call and afterwards replaces the
fields present in the request; the profile id and owning user never change.
"""

import logging
from typing import Any, Dict, Union

from sqlalchemy import select
from sqlalchemy.orm import Session

from talentbridge.core.errors import NotFound, ProfileRequired
from talentbridge.db.store import EntityStore
from talentbridge.db.tables import Employer, School, Student, User
from talentbridge.models.domain import Role
from talentbridge.schemas.schemas import (
    EmployerProfile, EmployerProfileIn, MeResponse, SchoolProfile, SchoolProfileIn,
    StudentProfile, StudentProfileIn, UserResponse,
)
from talentbridge.services import cascade
from talentbridge.utils.validation import validate_payload

logger = logging.getLogger(__name__)

# role -> (table, input schema, output schema)
PROFILE_KINDS = {
    Role.student: (Student, StudentProfileIn, StudentProfile),
    Role.school: (School, SchoolProfileIn, SchoolProfile),
    Role.employer: (Employer, EmployerProfileIn, EmployerProfile),
}

AnyProfile = Union[StudentProfile, SchoolProfile, EmployerProfile]


def find_profile(session: Session, role: Role, user_id: int):
    """Profile row owned by ``user_id`` for ``role``, or None."""
    table = PROFILE_KINDS[Role(role)][0]
    return session.scalars(select(table).where(table.user_id == user_id)).first()


class ProfileService:
    """Create, read and delete role-specific profiles."""

    def __init__(self, store: EntityStore):
        self.store = store

    def upsert_profile(self, user_id: int, role: Role, fields: Union[Dict[str, Any], Any]) -> AnyProfile:
        role = Role(role)
        table, input_schema, output_schema = PROFILE_KINDS[role]
        payload = validate_payload(input_schema, fields)
        values = payload.model_dump(mode="json")

        with self.store.session() as session:
            profile = find_profile(session, role, user_id)
            if profile is None:
                profile = table(user_id=user_id, **values)
                session.add(profile)
                action = "Created"
            else:
                # optional fields left out of the request keep their stored value
                for name in payload.model_fields_set:
                    setattr(profile, name, values[name])
                action = "Updated"
            session.flush()
            logger.info("%s %s profile %s for user %s", action, role.value, profile.id, user_id)
            return output_schema.model_validate(profile)

    def get_own_profile(self, user_id: int, role: Role) -> MeResponse:
        role = Role(role)
        output_schema = PROFILE_KINDS[role][2]
        with self.store.session() as session:
            user = session.get(User, user_id)
            profile = find_profile(session, role, user_id)
            if user is None or profile is None:
                raise ProfileRequired("There is no profile for this user")
            return MeResponse(
                user=UserResponse.model_validate(user),
                profile=output_schema.model_validate(profile),
            )

    def delete_user(self, user_id: int) -> None:
        """Remove the account, its profile and everything the profile owns."""
        with self.store.session() as session:
            user = session.get(User, user_id)
            if user is None:
                raise NotFound("User not found")
            cascade.delete_user(session, user)
