"""
Service dependencies.

Services are built once in ``create_app`` and kept on ``app.state``;
route handlers pull them in with ``Depends``.
"""

from fastapi import Request

from talentbridge.models.domain import ListingKind
from talentbridge.services.account_service import AccountService
from talentbridge.services.application_service import ApplicationService
from talentbridge.services.listing_service import ListingService
from talentbridge.services.profile_service import ProfileService


def get_account_service(request: Request) -> AccountService:
    return request.app.state.accounts


def get_profile_service(request: Request) -> ProfileService:
    return request.app.state.profiles


def get_application_service(request: Request) -> ApplicationService:
    return request.app.state.applications


def listing_service_dependency(kind: ListingKind):
    """Dependency returning the ListingService for ``kind``."""

    def dependency(request: Request) -> ListingService:
        return request.app.state.listings[kind]

    return dependency
