"""
Schemas module - Request/Response schemas for API endpoints.
"""

from profilehub.schemas.schemas import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    Opportunity,
    OpportunityCategory,
    ProfileCreate,
    ProfileResponse,
    ProfileUpdate,
    ProfileUpdateResponse,
    Project,
    SocialLinks,
)

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "MeResponse",
    "Opportunity",
    "OpportunityCategory",
    "ProfileCreate",
    "ProfileResponse",
    "ProfileUpdate",
    "ProfileUpdateResponse",
    "Project",
    "SocialLinks",
]
