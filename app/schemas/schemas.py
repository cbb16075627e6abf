"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Attributes are snake_case in Python; the JSON wire format is camelCase
(companyName, coverLetter, resumeLink, createdBy, ...).
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints
from pydantic.alias_generators import to_camel
from typing import Annotated, Optional, List
from datetime import datetime
from enum import Enum


# Required text: surrounding whitespace stripped, must not be empty
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    candidate = "candidate"
    employer = "employer"


class JobType(str, Enum):
    full_time = "Full-time"
    part_time = "Part-time"
    contract = "Contract"
    remote = "Remote"


class ApplicationStatus(str, Enum):
    applied = "applied"
    shortlisted = "shortlisted"
    interview = "interview"
    hired = "hired"
    rejected = "rejected"


# ============================================================
# EMBEDDED REFERENCES (populated documents)
# ============================================================

class UserRef(CamelModel):
    id: str
    name: str


class AuthorRef(CamelModel):
    id: str
    name: str
    profile_pic: str = ""
    role: Optional[UserRole] = None


class CommentAuthorRef(CamelModel):
    id: str
    name: str
    profile_pic: str = ""


class ApplicantRef(CamelModel):
    id: str
    name: str
    email: str
    profile_pic: str = ""
    skills: List[str] = []


class CompanyRef(CamelModel):
    id: str
    name: str
    logo: Optional[str] = None
    location: Optional[str] = None


class JobRef(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    salary: Optional[str] = None
    location: Optional[str] = None
    type: Optional[JobType] = None
    company: Optional[CompanyRef] = None


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(CamelModel):
    name: NonEmptyStr
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: UserRole = UserRole.candidate
    company_name: Optional[str] = None
    profile_pic: Optional[str] = None


class LoginRequest(CamelModel):
    email: EmailStr
    password: str
    role: Optional[UserRole] = None


class ProfileUpdate(CamelModel):
    name: Optional[NonEmptyStr] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=1)
    profile_pic: Optional[str] = None
    bio: Optional[str] = None
    resume: Optional[str] = None
    skills: Optional[List[str]] = None
    company_name: Optional[str] = None
    company_website: Optional[str] = None


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    role: UserRole
    profile_pic: str = ""
    bio: str = ""
    resume: str = ""
    skills: List[str] = []
    company_name: str = ""
    company_website: str = ""
    created_at: datetime
    updated_at: datetime


class RegisterResponse(CamelModel):
    token: str
    user: UserResponse


class LoginResponse(CamelModel):
    id: str
    name: str
    email: str
    role: UserRole
    token: str


class ProfileResponse(CamelModel):
    user: UserResponse
    profile_completion: int
    next_steps: List[str]


class ProfileUpdateResponse(CamelModel):
    user: UserResponse
    token: str


# ============================================================
# COMPANY SCHEMAS
# ============================================================

class CompanyCreate(CamelModel):
    name: NonEmptyStr
    description: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    logo: Optional[str] = None


class CompanyResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    logo: Optional[str] = None
    user: Optional[UserRef] = None
    created_at: datetime
    updated_at: datetime


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(CamelModel):
    title: NonEmptyStr
    description: NonEmptyStr
    salary: NonEmptyStr
    location: NonEmptyStr
    type: JobType = JobType.full_time
    company_name: NonEmptyStr
    company: Optional[str] = Field(None, description="Id of a company owned by the poster")


class JobUpdate(CamelModel):
    title: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None
    salary: Optional[NonEmptyStr] = None
    location: Optional[NonEmptyStr] = None
    type: Optional[JobType] = None
    company_name: Optional[NonEmptyStr] = None
    company: Optional[str] = Field(None, description="Company id to link; empty string unlinks")


class JobResponse(CamelModel):
    id: str
    title: str
    description: str
    salary: str
    location: str
    type: JobType
    company_name: str
    company: Optional[CompanyRef] = None
    created_by: Optional[UserRef] = None
    created_at: datetime
    updated_at: datetime


class JobCountResponse(BaseModel):
    count: int


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(CamelModel):
    cover_letter: str = ""
    resume_link: Optional[str] = None


class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus


class ApplicationResponse(CamelModel):
    id: str
    job: Optional[JobRef] = None
    applicant: Optional[ApplicantRef] = None
    status: ApplicationStatus
    cover_letter: str = ""
    resume_link: str
    created_at: datetime
    updated_at: datetime


# ============================================================
# COMMUNITY SCHEMAS (posts & comments)
# ============================================================

class PostCreate(CamelModel):
    content: NonEmptyStr
    image: str = ""


class PostUpdate(CamelModel):
    content: Optional[NonEmptyStr] = None
    image: Optional[str] = None


class PostResponse(CamelModel):
    id: str
    content: str
    image: str = ""
    author: Optional[AuthorRef] = None
    likes: List[str] = []
    created_at: datetime
    updated_at: datetime


class CommentCreate(CamelModel):
    text: NonEmptyStr


class CommentUpdate(CamelModel):
    text: Optional[NonEmptyStr] = None


class CommentResponse(CamelModel):
    id: str
    text: str
    post: str
    author: Optional[CommentAuthorRef] = None
    created_at: datetime
    updated_at: datetime


class PostDetailResponse(PostResponse):
    comments: List[CommentResponse] = []


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
