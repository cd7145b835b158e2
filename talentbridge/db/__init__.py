"""
Database module - entity store handle and relational tables.
"""
from talentbridge.db.store import EntityStore
from talentbridge.db.tables import (
    Application,
    Base,
    Employer,
    Job,
    Program,
    School,
    Student,
    User,
)

__all__ = [
    "EntityStore",
    "Base",
    "User",
    "Student",
    "School",
    "Employer",
    "Job",
    "Program",
    "Application",
]
