"""
User & Profile Routes

GET /users/me - Own user record and profile
DELETE /users/me - Delete account, profile and everything it owns
POST /users/student - Create or update student profile
POST /users/school - Create or update school profile
POST /users/employer - Create or update employer profile
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from talentbridge.api.deps import get_profile_service
from talentbridge.core.auth import get_identity, require_role
from talentbridge.models.domain import Identity, Role
from talentbridge.schemas.schemas import (
    EmployerProfile, MeResponse, MessageResponse, SchoolProfile, StudentProfile,
)
from talentbridge.services.profile_service import ProfileService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=MeResponse)
async def get_me(
    identity: Identity = Depends(get_identity),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Get current user's profile, shaped by role."""
    return profiles.get_own_profile(identity.user_id, identity.role)


@router.delete("/me", response_model=MessageResponse)
async def delete_me(
    identity: Identity = Depends(get_identity),
    profiles: ProfileService = Depends(get_profile_service),
):
    profiles.delete_user(identity.user_id)
    return MessageResponse(msg="User deleted")


@router.post("/student", response_model=StudentProfile)
async def upsert_student_profile(
    body: Dict[str, Any] = Body(...),
    identity: Identity = Depends(require_role(Role.student)),
    profiles: ProfileService = Depends(get_profile_service),
):
    return profiles.upsert_profile(identity.user_id, Role.student, body)


@router.post("/school", response_model=SchoolProfile)
async def upsert_school_profile(
    body: Dict[str, Any] = Body(...),
    identity: Identity = Depends(require_role(Role.school)),
    profiles: ProfileService = Depends(get_profile_service),
):
    return profiles.upsert_profile(identity.user_id, Role.school, body)


@router.post("/employer", response_model=EmployerProfile)
async def upsert_employer_profile(
    body: Dict[str, Any] = Body(...),
    identity: Identity = Depends(require_role(Role.employer)),
    profiles: ProfileService = Depends(get_profile_service),
):
    return profiles.upsert_profile(identity.user_id, Role.employer, body)
