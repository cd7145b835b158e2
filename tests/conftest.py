"""
Shared fixtures.

Each test gets its own in-memory SQLite store, an app bound to it and a
TestClient. ``make_user`` inserts accounts directly (skipping bcrypt) and
mints a bearer token for them.
"""

import itertools
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from talentbridge.core.auth import create_access_token
from talentbridge.core.config import Settings
from talentbridge.db.store import EntityStore
from talentbridge.db.tables import User
from talentbridge.main import create_app
from talentbridge.models.domain import Role

_emails = itertools.count(1)


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", jwt_secret_key="test-secret", log_level="WARNING")


@pytest.fixture
def store(settings):
    store = EntityStore(settings.store_url).open()
    store.create_schema()
    yield store
    store.close()


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def make_user(store, settings):
    def factory(role: Role, email: str = None):
        role = Role(role)
        with store.session() as session:
            user = User(
                email=email or f"{role.value}{next(_emails)}@example.com",
                password_hash="not-a-real-hash",
                role=role.value,
            )
            session.add(user)
            session.flush()
            user_id = user.id
        token = create_access_token({"sub": str(user_id), "role": role.value}, settings)
        return SimpleNamespace(
            id=user_id,
            role=role,
            token=token,
            headers={"Authorization": f"Bearer {token}"},
        )

    return factory


# ============================================================
# PAYLOADS (camelCase, as sent by the web client)
# ============================================================

@pytest.fixture
def student_payload():
    return {
        "firstName": "Amina",
        "lastName": "Diallo",
        "phone": "+33 6 12 34 56 78",
        "country": "France",
        "nationality": "Senegalese",
        "education": [{"degree": "BSc Computer Science", "institution": "Université de Lyon", "year": 2023}],
        "interests": ["data engineering"],
        "languages": ["French", "English"],
        "cv": "https://files.example.com/cv/amina.pdf",
        "availability": "immediate",
    }


@pytest.fixture
def school_payload():
    return {
        "name": "École Supérieure du Numérique",
        "description": "Engineering and design school",
        "location": {"country": "France", "city": "Paris", "address": "12 rue des Écoles"},
        "programs": ["Software Engineering"],
        "scholarships": True,
        "website": "https://esn.example.com",
        "contact": {"name": "Claire Martin", "email": "admissions@esn.example.com", "phone": "+33 1 23 45 67 89"},
    }


@pytest.fixture
def employer_payload():
    return {
        "companyName": "Nordlys Analytics",
        "description": "Data consultancy",
        "industry": ["Technology"],
        "locations": [{"country": "France", "city": "Lyon", "address": "3 place Bellecour"}],
        "jobTypes": ["CDI", "Internship"],
        "socialMedia": {"linkedin": "https://linkedin.com/company/nordlys"},
        "contact": {
            "name": "Jonas Berg",
            "position": "Talent Lead",
            "email": "jobs@nordlys.example.com",
            "phone": "+33 4 00 00 00 00",
        },
    }


@pytest.fixture
def job_payload():
    return {
        "title": "Junior Data Engineer",
        "description": "Build and run batch pipelines",
        "responsibilities": ["Maintain ETL jobs", "Write data quality checks"],
        "requirements": {"education": "Bachelor", "experience": "0-2 years", "skills": ["Python", "SQL"]},
        "jobType": "CDI",
        "location": {"country": "France", "city": "Lyon", "remote": False},
        "salary": {"min": 38000, "max": 45000, "currency": "EUR"},
        "deadline": "2025-12-01",
    }


@pytest.fixture
def program_payload():
    return {
        "title": "MSc Software Engineering",
        "description": "Two-year engineering master",
        "degreeType": "Master",
        "fieldOfStudy": "Computer Science",
        "duration": {"value": 2, "unit": "years"},
        "studyMode": "Hybrid",
        "tuition": {"amount": 9500, "currency": "EUR"},
        "scholarships": {"available": True, "description": "Merit-based"},
        "requirements": {
            "academic": ["Bachelor in CS or related"],
            "language": ["English B2"],
            "documents": ["Transcript", "CV"],
        },
        "deadline": "2025-06-30",
        "startDate": "2025-09-15",
    }


# ============================================================
# ACTORS WITH PROFILES
# ============================================================

@pytest.fixture
def employer(client, make_user, employer_payload):
    user = make_user(Role.employer)
    response = client.post("/api/users/employer", json=employer_payload, headers=user.headers)
    assert response.status_code == 200, response.text
    user.profile_id = response.json()["id"]
    return user


@pytest.fixture
def school(client, make_user, school_payload):
    user = make_user(Role.school)
    response = client.post("/api/users/school", json=school_payload, headers=user.headers)
    assert response.status_code == 200, response.text
    user.profile_id = response.json()["id"]
    return user


@pytest.fixture
def student(client, make_user, student_payload):
    user = make_user(Role.student)
    response = client.post("/api/users/student", json=student_payload, headers=user.headers)
    assert response.status_code == 200, response.text
    user.profile_id = response.json()["id"]
    return user


@pytest.fixture
def job(client, employer, job_payload):
    response = client.post("/api/jobs", json=job_payload, headers=employer.headers)
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def program(client, school, program_payload):
    response = client.post("/api/programs", json=program_payload, headers=school.headers)
    assert response.status_code == 200, response.text
    return response.json()
