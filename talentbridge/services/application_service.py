"""
Application Service

A student applies to exactly one job or program. apply() checks, in order:
1. the target listing exists                -> NotFound
2. the caller has a student profile         -> ProfileRequired
3. no earlier application to the same target -> DuplicateApplication
4. at least one document is attached        -> ValidationError

The partial unique indexes on applications are the final word on
duplicates: when two requests race past step 3, the losing insert fails
with IntegrityError and is reported as DuplicateApplication.
"""

import logging
from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from talentbridge.core.errors import (
    DuplicateApplication, Forbidden, InvalidTransition, NotFound, ProfileRequired,
    StoreError, ValidationError,
)
from talentbridge.db.store import EntityStore
from talentbridge.db.tables import Application, Student, utcnow
from talentbridge.models.domain import (
    ApplicationStatus, ApplicationTarget, JobTarget, ListingKind, can_transition, make_target,
)
from talentbridge.schemas.schemas import ApplicationCreate, ApplicationRead, ApplicationStatusUpdate
from talentbridge.services.listing_service import (
    LISTING_SPECS, find_owner_profile, load_listing, load_owned_listing,
)
from talentbridge.utils.validation import parse_id, validate_payload

logger = logging.getLogger(__name__)


def _target_column(target: ApplicationTarget):
    if isinstance(target, JobTarget):
        return Application.job_id
    return Application.program_id


class ApplicationService:
    """Submission, review workflow and listings of applications."""

    def __init__(self, store: EntityStore):
        self.store = store

    def _existing_application(self, session: Session, student_id: int, target: ApplicationTarget):
        return session.scalars(
            select(Application).where(
                Application.student_id == student_id,
                _target_column(target) == target.id,
            )
        ).first()

    def _already_applied(self, session: Session, student_id: int, target: ApplicationTarget) -> bool:
        return self._existing_application(session, student_id, target) is not None

    @staticmethod
    def _student(session: Session, user_id: int) -> Optional[Student]:
        return session.scalars(select(Student).where(Student.user_id == user_id)).first()

    def apply(
        self,
        student_user_id: int,
        target_kind: ListingKind,
        target_id: Any,
        documents: Any = None,
        cover_letter: Optional[str] = None,
    ) -> ApplicationRead:
        spec = LISTING_SPECS[ListingKind(target_kind)]
        kind = spec.kind.value

        with self.store.session() as session:
            listing = load_listing(session, spec, target_id)
            target = make_target(spec.kind, listing.id)

            student = self._student(session, student_user_id)
            if student is None:
                raise ProfileRequired("Student profile not found")
            student_id = student.id

            if self._already_applied(session, student_id, target):
                logger.warning("Student %s already applied to %s %s", student_id, kind, target.id)
                raise DuplicateApplication(f"Already applied to this {kind}")

            payload = validate_payload(ApplicationCreate, {
                "documents": [] if documents is None else documents,
                "coverLetter": cover_letter,
            })
            if not payload.documents:
                raise ValidationError.single("documents", "Documents are required")

            application = Application.for_target(
                student_id,
                target,
                status=ApplicationStatus.submitted.value,
                documents=[doc.model_dump(mode="json") for doc in payload.documents],
                cover_letter=payload.cover_letter,
                applied_at=utcnow(),
                updated_at=utcnow(),
            )
            session.add(application)
            try:
                session.flush()
            except IntegrityError as exc:
                # lost a race: a concurrent apply for the same target, or the listing was deleted
                session.rollback()
                if self._existing_application(session, student_id, target) is not None:
                    logger.warning("Student %s duplicate apply to %s %s rejected by store",
                                   student_id, kind, target.id)
                    raise DuplicateApplication(f"Already applied to this {kind}") from exc
                if session.scalar(select(spec.table.id).where(spec.table.id == target.id)) is None:
                    logger.warning("%s %s deleted while student %s was applying",
                                   spec.label, target.id, student_id)
                    raise NotFound(spec.not_found) from exc
                raise StoreError("Could not save application", exc) from exc

            logger.info("Student %s applied to %s %s (application %s)",
                        student_id, kind, target.id, application.id)
            return ApplicationRead.model_validate(application)

    def transition(
        self,
        application_id: Any,
        new_status: Any,
        actor_user_id: int,
        notes: Optional[str] = None,
    ) -> ApplicationRead:
        """Move an application along the review workflow. Listing owner only."""
        return self.review(application_id, actor_user_id, {"status": new_status, "notes": notes})

    def review(self, application_id: Any, actor_user_id: int, fields: Any) -> ApplicationRead:
        """``transition`` driven by a raw ``{status, notes}`` request body."""
        with self.store.session() as session:
            pk = parse_id(application_id, "Application not found")
            application = session.get(Application, pk)
            if application is None:
                raise NotFound("Application not found")

            target = application.target
            spec = LISTING_SPECS[target.kind]
            listing = session.get(spec.table, target.id)
            owner = find_owner_profile(session, spec, actor_user_id)
            if listing is None or owner is None or spec.owner_id(listing) != owner.id:
                logger.warning("User %s may not review application %s", actor_user_id, application.id)
                raise Forbidden("Not authorized to update this application")

            update = validate_payload(ApplicationStatusUpdate, fields)
            current = ApplicationStatus(application.status)
            if not can_transition(current, update.status):
                raise InvalidTransition(current.value, update.status.value)

            application.status = update.status.value
            if update.notes is not None:
                application.notes = update.notes
            application.updated_at = utcnow()
            session.flush()
            logger.info("Application %s: %s -> %s by user %s",
                        application.id, current.value, update.status.value, actor_user_id)
            return ApplicationRead.model_validate(application)

    def list_for_student(self, student_user_id: int) -> List[ApplicationRead]:
        with self.store.session() as session:
            student = self._student(session, student_user_id)
            if student is None:
                raise ProfileRequired("Student profile not found")
            rows = session.scalars(
                select(Application)
                .where(Application.student_id == student.id)
                .order_by(Application.applied_at.desc(), Application.id.desc())
            ).all()
            return [ApplicationRead.model_validate(row) for row in rows]

    def list_for_listing(self, kind: ListingKind, listing_id: Any, owner_user_id: int) -> List[ApplicationRead]:
        spec = LISTING_SPECS[ListingKind(kind)]
        with self.store.session() as session:
            listing, _ = load_owned_listing(session, spec, listing_id, owner_user_id, "view")
            target = make_target(spec.kind, listing.id)
            rows = session.scalars(
                select(Application)
                .where(_target_column(target) == target.id)
                .order_by(Application.applied_at.desc(), Application.id.desc())
            ).all()
            return [ApplicationRead.model_validate(row) for row in rows]
