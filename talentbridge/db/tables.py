"""
Relational schema.

Tables:
1. users        - login identity + role
2. students     - student profile (one per user)
3. schools      - school profile (one per user)
4. employers    - employer profile (one per user)
5. jobs         - listings owned by an employer
6. programs     - listings owned by a school
7. applications - a student's application to exactly one job or program

Nested, schema-flexible parts of profiles and listings (education history,
contact blocks, requirement blocks...) live in JSON columns.

Foreign keys carry no ON DELETE rules: dependents are removed by the
functions in ``talentbridge.services.cascade``.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON, Boolean, CheckConstraint, Column, Date, DateTime, ForeignKey, Index,
    Integer, String, Text, text,
)
from sqlalchemy.orm import declarative_base

from talentbridge.models.domain import (
    ApplicationStatus, ApplicationTarget, JobTarget, ProgramTarget,
)

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite drops tzinfo anyway)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<User {self.id} {self.role}>"


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=False)
    country = Column(String(100), nullable=False)
    nationality = Column(String(100), nullable=False)
    education = Column(JSON, nullable=False, default=list)
    interests = Column(JSON, nullable=False, default=list)
    languages = Column(JSON, nullable=False, default=list)
    cv = Column(String(500))
    availability = Column(String(20), nullable=False)


class School(Base):
    __tablename__ = "schools"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    logo = Column(String(500))
    banner = Column(String(500))
    location = Column(JSON, nullable=False)
    programs = Column(JSON, nullable=False, default=list)
    scholarships = Column(Boolean, nullable=False, default=False)
    website = Column(String(500))
    social_media = Column(JSON)
    contact = Column(JSON, nullable=False)


class Employer(Base):
    __tablename__ = "employers"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    company_name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    logo = Column(String(500))
    industry = Column(JSON, nullable=False, default=list)
    locations = Column(JSON, nullable=False, default=list)
    job_types = Column(JSON, nullable=False, default=list)
    website = Column(String(500))
    social_media = Column(JSON)
    contact = Column(JSON, nullable=False)


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True)
    employer_id = Column(Integer, ForeignKey("employers.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    responsibilities = Column(JSON, nullable=False, default=list)
    requirements = Column(JSON, nullable=False)
    job_type = Column(String(30), nullable=False)
    location = Column(JSON, nullable=False)
    salary = Column(JSON)
    deadline = Column(Date, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)


class Program(Base):
    __tablename__ = "programs"

    id = Column(Integer, primary_key=True)
    school_id = Column(Integer, ForeignKey("schools.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    degree_type = Column(String(30), nullable=False)
    field_of_study = Column(String(200), nullable=False)
    duration = Column(JSON, nullable=False)
    study_mode = Column(String(30), nullable=False)
    tuition = Column(JSON)
    scholarships = Column(JSON)
    requirements = Column(JSON, nullable=False)
    deadline = Column(Date, nullable=False)
    start_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (
        # exactly one target column is set
        CheckConstraint(
            "(job_id IS NULL) <> (program_id IS NULL)",
            name="ck_application_single_target",
        ),
        Index(
            "uq_application_student_job", "student_id", "job_id", unique=True,
            sqlite_where=text("job_id IS NOT NULL"),
            postgresql_where=text("job_id IS NOT NULL"),
        ),
        Index(
            "uq_application_student_program", "student_id", "program_id", unique=True,
            sqlite_where=text("program_id IS NOT NULL"),
            postgresql_where=text("program_id IS NOT NULL"),
        ),
    )

    id = Column(Integer, primary_key=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), index=True)
    program_id = Column(Integer, ForeignKey("programs.id"), index=True)
    status = Column(String(20), nullable=False, default=ApplicationStatus.submitted.value)
    documents = Column(JSON, nullable=False, default=list)
    cover_letter = Column(Text)
    notes = Column(Text)
    applied_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @classmethod
    def for_target(cls, student_id: int, target: ApplicationTarget, **fields) -> "Application":
        if isinstance(target, JobTarget):
            return cls(student_id=student_id, job_id=target.id, **fields)
        if isinstance(target, ProgramTarget):
            return cls(student_id=student_id, program_id=target.id, **fields)
        raise TypeError(f"Unsupported application target: {target!r}")

    @property
    def target(self) -> ApplicationTarget:
        if self.job_id is not None:
            return JobTarget(self.job_id)
        return ProgramTarget(self.program_id)

    def __repr__(self):
        return f"<Application {self.student_id} -> {self.target}>"
