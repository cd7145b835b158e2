"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
JSON keys are camelCase (``firstName``, ``jobType``); Python attributes are
snake_case. Both spellings are accepted on input.
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel

from talentbridge.models.domain import ApplicationStatus, Role


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


NonEmptyStr = Annotated[str, Field(min_length=1)]


# ============================================================
# ENUMS
# ============================================================

class Availability(str, Enum):
    immediate = "immediate"
    future = "future"


class JobType(str, Enum):
    cdi = "CDI"
    cdd = "CDD"
    internship = "Internship"
    apprenticeship = "Apprenticeship"
    freelance = "Freelance"


class DegreeType(str, Enum):
    bachelor = "Bachelor"
    master = "Master"
    phd = "PhD"
    certificate = "Certificate"
    diploma = "Diploma"


class DurationUnit(str, Enum):
    months = "months"
    years = "years"


class StudyMode(str, Enum):
    on_campus = "On-campus"
    online = "Online"
    hybrid = "Hybrid"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: Role


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    role: Role


class UserResponse(CamelModel):
    id: int
    email: str
    role: Role
    created_at: datetime


# ============================================================
# SHARED BLOCKS
# ============================================================

class Address(CamelModel):
    country: NonEmptyStr
    city: NonEmptyStr
    address: NonEmptyStr


class OfficeLocation(CamelModel):
    country: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None


class SocialMedia(CamelModel):
    facebook: Optional[str] = None
    twitter: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None


class Contact(CamelModel):
    name: NonEmptyStr
    email: EmailStr
    phone: NonEmptyStr


class EmployerContact(Contact):
    position: NonEmptyStr


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class Education(CamelModel):
    degree: NonEmptyStr
    institution: NonEmptyStr
    year: int


class StudentProfileIn(CamelModel):
    first_name: NonEmptyStr
    last_name: NonEmptyStr
    phone: NonEmptyStr
    country: NonEmptyStr
    nationality: NonEmptyStr
    education: List[Education] = []
    interests: List[NonEmptyStr] = Field(..., min_length=1)
    languages: List[NonEmptyStr] = Field(..., min_length=1)
    cv: Optional[str] = None
    availability: Availability


class SchoolProfileIn(CamelModel):
    name: NonEmptyStr
    description: NonEmptyStr
    logo: Optional[str] = None
    banner: Optional[str] = None
    location: Address
    programs: List[NonEmptyStr] = Field(..., min_length=1)
    scholarships: bool = False
    website: Optional[str] = None
    social_media: Optional[SocialMedia] = None
    contact: Contact


class EmployerProfileIn(CamelModel):
    company_name: NonEmptyStr
    description: NonEmptyStr
    logo: Optional[str] = None
    industry: List[NonEmptyStr] = Field(..., min_length=1)
    locations: List[OfficeLocation] = []
    job_types: List[JobType] = Field(..., min_length=1)
    website: Optional[str] = None
    social_media: Optional[SocialMedia] = None
    contact: EmployerContact


class StudentProfile(StudentProfileIn):
    role: Literal["student"] = "student"
    id: int
    user_id: int


class SchoolProfile(SchoolProfileIn):
    role: Literal["school"] = "school"
    id: int
    user_id: int


class EmployerProfile(EmployerProfileIn):
    role: Literal["employer"] = "employer"
    id: int
    user_id: int


# Tagged variant over the three profile kinds
Profile = Annotated[
    Union[StudentProfile, SchoolProfile, EmployerProfile],
    Field(discriminator="role"),
]


class MeResponse(CamelModel):
    user: UserResponse
    profile: Profile


# ============================================================
# OWNER PROJECTIONS (public fields joined onto listings)
# ============================================================

class EmployerSummary(CamelModel):
    id: int
    company_name: str
    logo: Optional[str] = None
    industry: List[str] = []


class EmployerDetail(EmployerSummary):
    description: str
    locations: List[OfficeLocation] = []
    website: Optional[str] = None
    social_media: Optional[SocialMedia] = None
    contact: EmployerContact


class SchoolSummary(CamelModel):
    id: int
    name: str
    logo: Optional[str] = None
    location: Address


class SchoolDetail(SchoolSummary):
    description: str
    website: Optional[str] = None
    social_media: Optional[SocialMedia] = None
    contact: Contact


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobRequirements(CamelModel):
    education: NonEmptyStr
    experience: NonEmptyStr
    skills: List[NonEmptyStr] = Field(..., min_length=1)


class JobLocation(CamelModel):
    country: NonEmptyStr
    city: NonEmptyStr
    remote: bool = False


class Salary(CamelModel):
    min: Optional[float] = None
    max: Optional[float] = None
    currency: Optional[str] = None


class JobIn(CamelModel):
    title: NonEmptyStr
    description: NonEmptyStr
    responsibilities: List[NonEmptyStr] = Field(..., min_length=1)
    requirements: JobRequirements
    job_type: JobType
    location: JobLocation
    salary: Optional[Salary] = None
    deadline: date


class JobRead(JobIn):
    id: int
    employer_id: int
    created_at: datetime
    employer: Optional[EmployerSummary] = None


class JobDetail(JobRead):
    employer: Optional[EmployerDetail] = None


# ============================================================
# PROGRAM SCHEMAS
# ============================================================

class Duration(CamelModel):
    value: float = Field(..., gt=0)
    unit: DurationUnit


class Tuition(CamelModel):
    amount: Optional[float] = None
    currency: Optional[str] = None
    notes: Optional[str] = None


class Scholarships(CamelModel):
    available: bool = False
    description: Optional[str] = None


class ProgramRequirements(CamelModel):
    academic: List[NonEmptyStr] = Field(..., min_length=1)
    language: List[NonEmptyStr] = Field(..., min_length=1)
    documents: List[NonEmptyStr] = Field(..., min_length=1)


class ProgramIn(CamelModel):
    title: NonEmptyStr
    description: NonEmptyStr
    degree_type: DegreeType
    field_of_study: NonEmptyStr
    duration: Duration
    study_mode: StudyMode
    tuition: Optional[Tuition] = None
    scholarships: Scholarships = Field(default_factory=Scholarships)
    requirements: ProgramRequirements
    deadline: date
    start_date: date


class ProgramRead(ProgramIn):
    id: int
    school_id: int
    created_at: datetime
    school: Optional[SchoolSummary] = None


class ProgramDetail(ProgramRead):
    school: Optional[SchoolDetail] = None


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationDocument(CamelModel):
    name: Optional[str] = None
    url: NonEmptyStr

    @model_validator(mode="before")
    @classmethod
    def accept_bare_reference(cls, value):
        # "cv.pdf" is shorthand for {"name": "cv.pdf", "url": "cv.pdf"}
        if isinstance(value, str):
            return {"name": value, "url": value}
        return value


class ApplicationCreate(CamelModel):
    documents: List[ApplicationDocument] = []
    cover_letter: Optional[str] = None


class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus
    notes: Optional[str] = None


class ApplicationRead(CamelModel):
    id: int
    student_id: int
    job_id: Optional[int] = None
    program_id: Optional[int] = None
    status: ApplicationStatus
    documents: List[ApplicationDocument]
    cover_letter: Optional[str] = None
    notes: Optional[str] = None
    applied_at: datetime
    updated_at: datetime


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    msg: str


class HealthResponse(BaseModel):
    status: str
    store: str
