"""
Profile Routes

POST /profiles/add - Register a profile (multipart, optional image)
POST /profiles/login - Login and get JWT token
GET /profiles/me - Get the authenticated profile's summary
PUT /profiles/edit/{profile_id} - Edit own profile (multipart, optional image)
GET /profiles/search?q= - Search profiles by name, skills, location
GET /profiles/{profile_id} - View a profile (counts a view)
GET /profiles - Most viewed profiles
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, File, Form, Query, UploadFile
from pydantic import ValidationError
from pymongo.collection import Collection
from typing import List, Optional

from profilehub.db.mongodb import get_profiles_collection
from profilehub.core.auth import hash_password, verify_password, create_access_token, get_current_profile
from profilehub.core.config import get_settings
from profilehub.services.profile_service import (
    ProfileService, ProfileNameTakenError, serialize_profile, serialize_profiles, to_object_id
)
from profilehub.services.image_host import CloudinaryUploader, ImageUploadError, get_image_uploader
from profilehub.utils.file_upload import has_upload, read_image_upload
from profilehub.schemas.schemas import (
    EmbeddedFieldError, parse_projects, parse_skills, parse_social_links,
    ProfileCreate, ProfileUpdate, LoginRequest,
    AuthResponse, ErrorResponse, MeResponse, ProfileResponse, ProfileUpdateResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/profiles",
    tags=["Profiles"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    }
)


def _first_error(e: ValidationError) -> str:
    error = e.errors()[0]
    field = ".".join(str(part) for part in error["loc"])
    return f"{field}: {error['msg']}" if field else error["msg"]


def _build_profile_data(model, skills: Optional[str], socialLinks: Optional[str],
                        projects: Optional[str], **fields):
    """Parse the JSON/CSV-encoded form fields and validate them into `model`."""
    try:
        return model(
            skills=parse_skills(skills),
            socialLinks=parse_social_links(socialLinks),
            projects=parse_projects(projects),
            **fields
        )
    except EmbeddedFieldError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=_first_error(e))


async def _upload_image(image: Optional[UploadFile], uploader: Optional[CloudinaryUploader]) -> Optional[str]:
    """Forward an uploaded image to the image host. None when no image was sent."""
    if not has_upload(image):
        return None

    content, filename = await read_image_upload(image)

    if uploader is None:
        raise HTTPException(status_code=500, detail="Image host not configured")

    try:
        return await uploader.upload(content, filename)
    except ImageUploadError as e:
        logger.error("Image upload failed for %s: %s", filename, e)
        raise HTTPException(
            status_code=500,
            detail={"error": "Image upload failed", "details": str(e)}
        )


@router.post("/add", response_model=AuthResponse)
async def add_profile(
    name: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    skills: Optional[str] = Form(None, description="Comma-separated skills"),
    socialLinks: Optional[str] = Form(None, description="JSON object: github, linkedin, twitter, instagram"),
    location: Optional[str] = Form(None),
    projects: Optional[str] = Form(None, description="JSON array of {title, description, codeSnippet, url}"),
    image: Optional[UploadFile] = File(None),
    collection: Collection = Depends(get_profiles_collection),
    uploader: Optional[CloudinaryUploader] = Depends(get_image_uploader),
):
    """
    Register a new profile and log it in.

    Returns the stored profile (without password) and a bearer token.
    """
    name = name.strip() if name else name
    if not name or not password:
        raise HTTPException(status_code=400, detail="Name and password are required")

    service = ProfileService(collection)
    if service.get_by_name(name):
        raise HTTPException(status_code=400, detail="Profile name already exists")

    data = _build_profile_data(
        ProfileCreate, skills, socialLinks, projects,
        name=name, password=password, bio=bio, location=location
    )

    image_url = await _upload_image(image, uploader) or get_settings().default_image_url

    try:
        doc = service.create(data, hash_password(data.password), image_url)
    except ProfileNameTakenError:
        raise HTTPException(status_code=400, detail="Profile name already exists")

    logger.info("Created profile %s with imageUrl %s", doc["name"], image_url)

    token = create_access_token(str(doc["_id"]), doc["name"])
    return AuthResponse(profile=serialize_profile(doc), token=token)


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, collection: Collection = Depends(get_profiles_collection)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    name = request.name.strip() if request.name else request.name
    if not name or not request.password:
        raise HTTPException(status_code=400, detail="Name and password are required")

    profile = ProfileService(collection).get_by_name(name)

    if not profile or not verify_password(request.password, profile.get("password", "")):
        raise HTTPException(status_code=401, detail="Invalid name or password")

    token = create_access_token(str(profile["_id"]), profile["name"])
    return AuthResponse(profile=serialize_profile(profile), token=token)


@router.get("/me", response_model=MeResponse)
async def get_me(profile: dict = Depends(get_current_profile)):
    """Get current authenticated profile's id, name and image."""
    return MeResponse(
        userId=str(profile["_id"]),
        name=profile["name"],
        imageUrl=profile.get("imageUrl")
    )


@router.put("/edit/{profile_id}", response_model=ProfileUpdateResponse)
async def edit_profile(
    profile_id: str,
    bio: Optional[str] = Form(None),
    skills: Optional[str] = Form(None, description="Comma-separated skills"),
    socialLinks: Optional[str] = Form(None, description="JSON object: github, linkedin, twitter, instagram"),
    location: Optional[str] = Form(None),
    projects: Optional[str] = Form(None, description="JSON array of {title, description, codeSnippet, url}"),
    image: Optional[UploadFile] = File(None),
    current: dict = Depends(get_current_profile),
    collection: Collection = Depends(get_profiles_collection),
    uploader: Optional[CloudinaryUploader] = Depends(get_image_uploader),
):
    """Edit own profile. Only provided fields are updated."""
    if str(current["_id"]) != profile_id:
        logger.warning("Profile %s tried to edit profile %s", current["_id"], profile_id)
        raise HTTPException(status_code=403, detail="Unauthorized to edit this profile")

    data = _build_profile_data(
        ProfileUpdate, skills, socialLinks, projects,
        bio=bio, location=location
    )

    image_url = await _upload_image(image, uploader)

    updated = ProfileService(collection).update(profile_id, data, image_url)
    if not updated:
        raise HTTPException(status_code=404, detail="Profile not found")

    logger.info("Edited profile %s with imageUrl %s", updated["name"], updated.get("imageUrl"))

    return ProfileUpdateResponse(
        message="Profile updated successfully",
        profile=serialize_profile(updated)
    )


@router.get("/search", response_model=List[ProfileResponse])
async def search_profiles(
    q: Optional[str] = Query(None, description="Matched against name, skills and location"),
    collection: Collection = Depends(get_profiles_collection),
):
    """Case-insensitive substring search. At most 50 results."""
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Search query is required")

    return serialize_profiles(ProfileService(collection).search(q.strip()))


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(profile_id: str, collection: Collection = Depends(get_profiles_collection)):
    """View a single profile. Every call counts one view."""
    if to_object_id(profile_id) is None:
        raise HTTPException(status_code=400, detail="Invalid profile ID")

    profile = ProfileService(collection).get_and_count_view(profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")

    return serialize_profile(profile)


@router.get("", response_model=List[ProfileResponse])
@router.get("/", response_model=List[ProfileResponse], include_in_schema=False)
async def list_profiles(collection: Collection = Depends(get_profiles_collection)):
    """Top 50 profiles by view count."""
    return serialize_profiles(ProfileService(collection).list_top())
