"""
Cascade deletes.

Each function removes a record together with everything that depends on
it, using the caller's session so the whole cascade commits or rolls back
as one transaction. Dependents are deleted before their owner because the
foreign keys carry no ON DELETE rules.

    user ─┬─ student  ── applications
          ├─ school   ── programs ── applications
          └─ employer ── jobs     ── applications
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from talentbridge.db.tables import Application, Employer, Job, Program, School, Student, User
from talentbridge.models.domain import ListingKind, Role

logger = logging.getLogger(__name__)


def _purge(session: Session, statement) -> int:
    """Run a bulk DELETE without reconciling objects already loaded in the session."""
    result = session.execute(statement, execution_options={"synchronize_session": False})
    return result.rowcount


def delete_job(session: Session, job_id: int) -> int:
    """Delete a job and its applications. Returns the number of applications removed."""
    removed = _purge(session, delete(Application).where(Application.job_id == job_id))
    _purge(session, delete(Job).where(Job.id == job_id))
    logger.info("Deleted job %s (%s applications)", job_id, removed)
    return removed


def delete_program(session: Session, program_id: int) -> int:
    """Delete a program and its applications. Returns the number of applications removed."""
    removed = _purge(session, delete(Application).where(Application.program_id == program_id))
    _purge(session, delete(Program).where(Program.id == program_id))
    logger.info("Deleted program %s (%s applications)", program_id, removed)
    return removed


def delete_listing(session: Session, kind: ListingKind, listing_id: int) -> int:
    if ListingKind(kind) is ListingKind.job:
        return delete_job(session, listing_id)
    return delete_program(session, listing_id)


def delete_employer(session: Session, employer_id: int) -> None:
    job_ids = select(Job.id).where(Job.employer_id == employer_id)
    applications = _purge(session, delete(Application).where(Application.job_id.in_(job_ids)))
    jobs = _purge(session, delete(Job).where(Job.employer_id == employer_id))
    _purge(session, delete(Employer).where(Employer.id == employer_id))
    logger.info("Deleted employer %s (%s jobs, %s applications)", employer_id, jobs, applications)


def delete_school(session: Session, school_id: int) -> None:
    program_ids = select(Program.id).where(Program.school_id == school_id)
    applications = _purge(session, delete(Application).where(Application.program_id.in_(program_ids)))
    programs = _purge(session, delete(Program).where(Program.school_id == school_id))
    _purge(session, delete(School).where(School.id == school_id))
    logger.info("Deleted school %s (%s programs, %s applications)", school_id, programs, applications)


def delete_student(session: Session, student_id: int) -> None:
    applications = _purge(session, delete(Application).where(Application.student_id == student_id))
    _purge(session, delete(Student).where(Student.id == student_id))
    logger.info("Deleted student %s (%s applications)", student_id, applications)


PROFILE_DELETERS = {
    Role.student: (Student, delete_student),
    Role.school: (School, delete_school),
    Role.employer: (Employer, delete_employer),
}


def delete_user(session: Session, user: User) -> None:
    """Delete a user, its profile and everything the profile owns."""
    table, deleter = PROFILE_DELETERS[Role(user.role)]
    profile_id = session.scalars(select(table.id).where(table.user_id == user.id)).first()
    if profile_id is not None:
        deleter(session, profile_id)
    _purge(session, delete(User).where(User.id == user.id))
    logger.info("Deleted user %s (%s)", user.id, user.role)
