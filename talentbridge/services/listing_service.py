"""
Listing Service - jobs and programs.

Jobs (owned by employers) and programs (owned by schools) behave the same
way and differ only in their field schema, so one ``ListingService`` is
parameterised by a ``ListingSpec``:

create  - owner profile required; payload validated; owner = caller's profile
update  - owner only; patch merged over current fields and re-validated
delete  - owner only; applications removed in the same transaction
get     - public; listing + full public owner projection
list    - public; listings + summary owner projection, newest first
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Type

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from talentbridge.core.errors import Forbidden, NotFound, ProfileRequired, ValidationError
from talentbridge.db.store import EntityStore
from talentbridge.db.tables import Employer, Job, Program, School, utcnow
from talentbridge.models.domain import ListingKind, Role
from talentbridge.schemas.schemas import (
    EmployerDetail, EmployerSummary, JobDetail, JobIn, JobRead, ProgramDetail, ProgramIn,
    ProgramRead, SchoolDetail, SchoolSummary,
)
from talentbridge.services import cascade
from talentbridge.utils.validation import field_names_by_alias, parse_id, validate_payload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListingSpec:
    kind: ListingKind
    label: str
    table: Any
    owner_table: Any
    owner_role: Role
    owner_column: str           # e.g. "employer_id"
    owner_field: str            # key of the owner projection in responses
    input_schema: Type[BaseModel]
    read_schema: Type[BaseModel]
    detail_schema: Type[BaseModel]
    owner_summary: Type[BaseModel]
    owner_detail: Type[BaseModel]
    date_fields: Tuple[str, ...]

    @property
    def not_found(self) -> str:
        return f"{self.label} not found"

    def owner_id(self, listing) -> int:
        return getattr(listing, self.owner_column)


JOB = ListingSpec(
    kind=ListingKind.job,
    label="Job",
    table=Job,
    owner_table=Employer,
    owner_role=Role.employer,
    owner_column="employer_id",
    owner_field="employer",
    input_schema=JobIn,
    read_schema=JobRead,
    detail_schema=JobDetail,
    owner_summary=EmployerSummary,
    owner_detail=EmployerDetail,
    date_fields=("deadline",),
)

PROGRAM = ListingSpec(
    kind=ListingKind.program,
    label="Program",
    table=Program,
    owner_table=School,
    owner_role=Role.school,
    owner_column="school_id",
    owner_field="school",
    input_schema=ProgramIn,
    read_schema=ProgramRead,
    detail_schema=ProgramDetail,
    owner_summary=SchoolSummary,
    owner_detail=SchoolDetail,
    date_fields=("deadline", "start_date"),
)

LISTING_SPECS = {ListingKind.job: JOB, ListingKind.program: PROGRAM}


def find_owner_profile(session: Session, spec: ListingSpec, user_id: int):
    table = spec.owner_table
    return session.scalars(select(table).where(table.user_id == user_id)).first()


def load_listing(session: Session, spec: ListingSpec, listing_id: Any):
    pk = parse_id(listing_id, spec.not_found)
    listing = session.get(spec.table, pk)
    if listing is None:
        raise NotFound(spec.not_found)
    return listing


def load_owned_listing(session: Session, spec: ListingSpec, listing_id: Any, owner_user_id: int, verb: str):
    """Listing and owner profile, or ``Forbidden`` unless ``owner_user_id`` owns it."""
    listing = load_listing(session, spec, listing_id)
    owner = find_owner_profile(session, spec, owner_user_id)
    if owner is None or spec.owner_id(listing) != owner.id:
        logger.warning("User %s may not %s %s %s", owner_user_id, verb, spec.kind.value, listing.id)
        raise Forbidden(f"Not authorized to {verb} this {spec.kind.value}")
    return listing, owner


class ListingService:
    """CRUD for one listing kind, scoped to the owning profile."""

    def __init__(self, store: EntityStore, kind: ListingKind):
        self.store = store
        self.spec = LISTING_SPECS[ListingKind(kind)]

    # ------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------

    def _column_values(self, payload: BaseModel) -> Dict[str, Any]:
        # JSON columns need plain data; date columns need date objects
        values = payload.model_dump(mode="json")
        for name in self.spec.date_fields:
            values[name] = getattr(payload, name)
        return values

    def _present(self, listing, owner, detail: bool = False) -> BaseModel:
        spec = self.spec
        schema = spec.detail_schema if detail else spec.read_schema
        projection_schema = spec.owner_detail if detail else spec.owner_summary
        read = schema.model_validate(listing)
        if owner is None:
            return read
        return read.model_copy(update={spec.owner_field: projection_schema.model_validate(owner)})

    def _merge_patch(self, listing, patch: Any) -> BaseModel:
        if isinstance(patch, BaseModel):
            patch = patch.model_dump(exclude_unset=True)
        if not isinstance(patch, dict):
            raise ValidationError.single("body", "Update must be a JSON object")

        names = field_names_by_alias(self.spec.input_schema)
        current = self.spec.input_schema.model_validate(listing).model_dump()
        for key, value in patch.items():
            # unknown keys (id, owner, createdAt...) are not patchable
            if key in names:
                current[names[key]] = value
        return validate_payload(self.spec.input_schema, current)

    # ------------------------------------------------------------
    # operations
    # ------------------------------------------------------------

    def create(self, owner_user_id: int, fields: Any) -> BaseModel:
        spec = self.spec
        with self.store.session() as session:
            owner = find_owner_profile(session, spec, owner_user_id)
            if owner is None:
                raise ProfileRequired(f"{spec.owner_role.value.capitalize()} profile not found")

            payload = validate_payload(spec.input_schema, fields)
            listing = spec.table(**self._column_values(payload), created_at=utcnow())
            setattr(listing, spec.owner_column, owner.id)
            session.add(listing)
            session.flush()
            logger.info("User %s created %s %s", owner_user_id, spec.kind.value, listing.id)
            return self._present(listing, owner)

    def update(self, listing_id: Any, owner_user_id: int, patch: Any) -> BaseModel:
        with self.store.session() as session:
            listing, owner = load_owned_listing(session, self.spec, listing_id, owner_user_id, "update")
            payload = self._merge_patch(listing, patch)
            for name, value in self._column_values(payload).items():
                setattr(listing, name, value)
            pk = listing.id
            try:
                session.flush()
            except StaleDataError as exc:
                # deleted by someone else after the ownership check
                logger.warning("%s %s vanished during update", self.spec.label, pk)
                raise NotFound(self.spec.not_found) from exc
            logger.info("User %s updated %s %s", owner_user_id, self.spec.kind.value, pk)
            return self._present(listing, owner)

    def delete(self, listing_id: Any, owner_user_id: int) -> None:
        with self.store.session() as session:
            listing, _ = load_owned_listing(session, self.spec, listing_id, owner_user_id, "delete")
            cascade.delete_listing(session, self.spec.kind, listing.id)

    def get(self, listing_id: Any) -> BaseModel:
        with self.store.session() as session:
            listing = load_listing(session, self.spec, listing_id)
            owner = session.get(self.spec.owner_table, self.spec.owner_id(listing))
            return self._present(listing, owner, detail=True)

    def list(self) -> List[BaseModel]:
        spec = self.spec
        table = spec.table
        with self.store.session() as session:
            listings = session.scalars(
                select(table).order_by(table.created_at.desc(), table.id.desc())
            ).all()
            owner_ids = {spec.owner_id(listing) for listing in listings}
            owners = {}
            if owner_ids:
                rows = session.scalars(
                    select(spec.owner_table).where(spec.owner_table.id.in_(owner_ids))
                ).all()
                owners = {owner.id: owner for owner in rows}
            return [self._present(listing, owners.get(spec.owner_id(listing))) for listing in listings]
