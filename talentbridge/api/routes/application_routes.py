"""
Application Routes

GET /applications/me - Student's own applications, newest first
PUT /applications/{application_id}/status - Move along the review workflow (listing owner)
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from talentbridge.api.deps import get_application_service
from talentbridge.core.auth import get_identity, require_role
from talentbridge.models.domain import Identity, Role
from talentbridge.schemas.schemas import ApplicationRead
from talentbridge.services.application_service import ApplicationService

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.get("/me", response_model=List[ApplicationRead])
async def my_applications(
    identity: Identity = Depends(require_role(Role.student)),
    applications: ApplicationService = Depends(get_application_service),
):
    return applications.list_for_student(identity.user_id)


@router.put("/{application_id}/status", response_model=ApplicationRead)
async def update_status(
    application_id: str,
    body: Dict[str, Any] = Body(...),
    identity: Identity = Depends(get_identity),
    applications: ApplicationService = Depends(get_application_service),
):
    """
    Update application status.

    submitted -> under_review -> interview -> accepted | rejected
    """
    return applications.review(application_id, identity.user_id, body)
