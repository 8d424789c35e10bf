"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from typing import Optional, List
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class OpportunityCategory(str, Enum):
    jobs = "jobs"
    internships = "internships"
    bootcamps = "bootcamps"
    hackathons = "hackathons"
    mentorship = "mentorship"
    remote = "remote"


BIO_MAX_LENGTH = 500


# ============================================================
# PROFILE SUB-DOCUMENTS
# ============================================================

class SocialLinks(BaseModel):
    github: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    instagram: Optional[str] = None

class Project(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    codeSnippet: Optional[str] = None
    url: Optional[str] = None


social_links_adapter = TypeAdapter(SocialLinks)
projects_adapter = TypeAdapter(List[Project])


class EmbeddedFieldError(ValueError):
    """Raised when a JSON-encoded form field is malformed."""


def parse_skills(raw: Optional[str]) -> Optional[List[str]]:
    """Split a comma-separated skills field; None when the field was not sent."""
    if raw is None:
        return None
    return [s.strip() for s in raw.split(",") if s.strip()]


def parse_social_links(raw: Optional[str]) -> Optional[SocialLinks]:
    """Parse the socialLinks form field (a JSON object)."""
    if raw is None:
        return None
    try:
        return social_links_adapter.validate_json(raw)
    except ValidationError as e:
        raise EmbeddedFieldError("socialLinks must be a JSON object of link strings") from e


def parse_projects(raw: Optional[str]) -> Optional[List[Project]]:
    """Parse the projects form field (a JSON array of project objects)."""
    if raw is None:
        return None
    try:
        return projects_adapter.validate_json(raw)
    except ValidationError as e:
        for error in e.errors():
            if error["loc"] and error["loc"][-1] == "title":
                raise EmbeddedFieldError("Project title is required") from e
        raise EmbeddedFieldError("Projects must be a JSON array of project objects") from e


# ============================================================
# PROFILE REQUEST SCHEMAS
# ============================================================

class ProfileUpdate(BaseModel):
    bio: Optional[str] = Field(None, max_length=BIO_MAX_LENGTH)
    skills: Optional[List[str]] = None
    socialLinks: Optional[SocialLinks] = None
    location: Optional[str] = None
    projects: Optional[List[Project]] = None

class ProfileCreate(ProfileUpdate):
    name: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

class LoginRequest(BaseModel):
    name: Optional[str] = None
    password: Optional[str] = None


# ============================================================
# PROFILE RESPONSE SCHEMAS
# ============================================================

class ProfileResponse(BaseModel):
    """Public view of a profile. The password hash has no field here."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    bio: Optional[str] = None
    skills: List[str] = []
    socialLinks: SocialLinks = SocialLinks()
    location: Optional[str] = None
    imageUrl: Optional[str] = None
    projects: List[Project] = []
    views: int = 0
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

class AuthResponse(BaseModel):
    profile: ProfileResponse
    token: str

class ProfileUpdateResponse(BaseModel):
    message: str
    profile: ProfileResponse

class MeResponse(BaseModel):
    userId: str
    name: str
    imageUrl: Optional[str] = None


# ============================================================
# OPPORTUNITY SCHEMAS
# ============================================================

class Opportunity(BaseModel):
    """Uniform listing built from a third-party search result."""
    model_config = ConfigDict(extra="allow")

    id: str
    title: str
    company: str
    location: str
    description: str
    link: str


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
