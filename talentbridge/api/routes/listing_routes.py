"""
Listing Routes - one router per listing kind.

/jobs (employer-owned) and /programs (school-owned) share the same shape:

GET    /{kind}s                          - List, newest first (public)
GET    /{kind}s/{id}                     - Details with owner info (public)
POST   /{kind}s                          - Create (owner role only)
PUT    /{kind}s/{id}                     - Update (owner only)
DELETE /{kind}s/{id}                     - Delete + its applications (owner only)
POST   /{kind}s/{id}/apply               - Apply (student only)
GET    /{kind}s/{id}/applications        - Received applications (owner only)
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends

from talentbridge.api.deps import get_application_service, listing_service_dependency
from talentbridge.core.auth import require_role
from talentbridge.models.domain import Identity, ListingKind, Role
from talentbridge.schemas.schemas import ApplicationRead, MessageResponse
from talentbridge.services.application_service import ApplicationService
from talentbridge.services.listing_service import LISTING_SPECS, ListingService


def build_listing_router(kind: ListingKind) -> APIRouter:
    spec = LISTING_SPECS[ListingKind(kind)]
    get_listings = listing_service_dependency(spec.kind)
    owner_only = require_role(spec.owner_role)
    student_only = require_role(Role.student)

    router = APIRouter(prefix=f"/{spec.kind.value}s", tags=[f"{spec.label}s"])

    @router.get("", response_model=List[spec.read_schema])
    async def list_listings(listings: ListingService = Depends(get_listings)):
        return listings.list()

    @router.get("/{listing_id}", response_model=spec.detail_schema)
    async def get_listing(listing_id: str, listings: ListingService = Depends(get_listings)):
        return listings.get(listing_id)

    @router.post("", response_model=spec.read_schema)
    async def create_listing(
        body: Dict[str, Any] = Body(...),
        identity: Identity = Depends(owner_only),
        listings: ListingService = Depends(get_listings),
    ):
        return listings.create(identity.user_id, body)

    @router.put("/{listing_id}", response_model=spec.read_schema)
    async def update_listing(
        listing_id: str,
        body: Dict[str, Any] = Body(...),
        identity: Identity = Depends(owner_only),
        listings: ListingService = Depends(get_listings),
    ):
        return listings.update(listing_id, identity.user_id, body)

    @router.delete("/{listing_id}", response_model=MessageResponse)
    async def delete_listing(
        listing_id: str,
        identity: Identity = Depends(owner_only),
        listings: ListingService = Depends(get_listings),
    ):
        listings.delete(listing_id, identity.user_id)
        return MessageResponse(msg=f"{spec.label} removed")

    @router.post("/{listing_id}/apply", response_model=ApplicationRead)
    async def apply(
        listing_id: str,
        body: Optional[Dict[str, Any]] = Body(None),
        identity: Identity = Depends(student_only),
        applications: ApplicationService = Depends(get_application_service),
    ):
        body = body or {}
        return applications.apply(
            identity.user_id,
            spec.kind,
            listing_id,
            documents=body.get("documents"),
            cover_letter=body.get("coverLetter", body.get("cover_letter")),
        )

    @router.get("/{listing_id}/applications", response_model=List[ApplicationRead])
    async def received_applications(
        listing_id: str,
        identity: Identity = Depends(owner_only),
        applications: ApplicationService = Depends(get_application_service),
    ):
        return applications.list_for_listing(spec.kind, listing_id, identity.user_id)

    return router


job_router = build_listing_router(ListingKind.job)
program_router = build_listing_router(ListingKind.program)
