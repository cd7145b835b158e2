"""
Models module - domain types used across services.

Difference from schemas:
- Models: internal types (roles, identities, application targets)
- Schemas: API contract (what client sends/receives)
"""

from talentbridge.models.domain import (
    STATUS_TRANSITIONS,
    ApplicationStatus,
    ApplicationTarget,
    Identity,
    JobTarget,
    ListingKind,
    ProgramTarget,
    Role,
    can_transition,
    make_target,
)

__all__ = [
    "STATUS_TRANSITIONS",
    "ApplicationStatus",
    "ApplicationTarget",
    "Identity",
    "JobTarget",
    "ListingKind",
    "ProgramTarget",
    "Role",
    "can_transition",
    "make_target",
]
