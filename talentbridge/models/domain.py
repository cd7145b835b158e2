"""
Domain types shared by the services.

- Role / ListingKind / ApplicationStatus enums
- Identity: what the access gate resolves a bearer token to
- ApplicationTarget: JobTarget | ProgramTarget, the single listing an
  application points at
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, FrozenSet, Union


class Role(str, Enum):
    student = "student"
    school = "school"
    employer = "employer"


class ListingKind(str, Enum):
    job = "job"
    program = "program"


class ApplicationStatus(str, Enum):
    submitted = "submitted"
    under_review = "under_review"
    interview = "interview"
    accepted = "accepted"
    rejected = "rejected"


# Ordered workflow; accepted and rejected are terminal
STATUS_TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    ApplicationStatus.submitted: frozenset({ApplicationStatus.under_review}),
    ApplicationStatus.under_review: frozenset({ApplicationStatus.interview}),
    ApplicationStatus.interview: frozenset({ApplicationStatus.accepted, ApplicationStatus.rejected}),
    ApplicationStatus.accepted: frozenset(),
    ApplicationStatus.rejected: frozenset(),
}


def can_transition(current: ApplicationStatus, new: ApplicationStatus) -> bool:
    return new in STATUS_TRANSITIONS[current]


@dataclass(frozen=True)
class Identity:
    user_id: int
    role: Role


@dataclass(frozen=True)
class JobTarget:
    id: int
    kind: ClassVar[ListingKind] = ListingKind.job


@dataclass(frozen=True)
class ProgramTarget:
    id: int
    kind: ClassVar[ListingKind] = ListingKind.program


ApplicationTarget = Union[JobTarget, ProgramTarget]


def make_target(kind: ListingKind, listing_id: int) -> ApplicationTarget:
    if ListingKind(kind) is ListingKind.job:
        return JobTarget(listing_id)
    return ProgramTarget(listing_id)
