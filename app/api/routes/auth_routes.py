"""
Authentication Routes

POST /auth/register - Register new user and get JWT token
POST /auth/login - Login and get JWT token
GET /auth/profile - Get own profile with completion score
PUT /auth/profile - Update own profile
"""

import logging
from fastapi import APIRouter, HTTPException, Depends
from pymongo.errors import DuplicateKeyError

from app.core.auth import hash_password, verify_password, create_user_token, get_current_user
from app.services.mongo_service import UserService
from app.schemas.schemas import (
    RegisterRequest, LoginRequest, ProfileUpdate, RegisterResponse, LoginResponse,
    ProfileResponse, ProfileUpdateResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

# Weight of each filled-in profile field toward profile completion
COMMON_PROFILE_WEIGHTS = {"name": 10, "email": 10, "profile_pic": 10}
ROLE_PROFILE_WEIGHTS = {
    "candidate": {"resume": 30, "skills": 20, "bio": 10},
    "employer": {"company_name": 30, "company_website": 20, "bio": 10},
}
NEXT_STEPS = {
    "candidate": ["Upload resume", "Add skills", "Complete bio"],
    "employer": ["Complete company profile", "Add company website", "Write bio"],
}


def profile_completion(user: dict) -> int:
    """Percentage (0-100) of the weighted profile fields the user has filled in."""
    weights = dict(COMMON_PROFILE_WEIGHTS, **ROLE_PROFILE_WEIGHTS[user["role"]])
    earned = sum(weight for field, weight in weights.items() if user.get(field))
    return round(earned * 100 / sum(weights.values()))


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new user account and log them in.

    Employers may pass companyName; it is ignored for candidates.
    """
    service = UserService()
    if service.get_by_email(request.email):
        raise HTTPException(status_code=400, detail="User already exists")

    try:
        user = service.create(
            name=request.name,
            email=request.email,
            password_hash=hash_password(request.password),
            role=request.role.value,
            company_name=(request.company_name or "") if request.role.value == "employer" else "",
            profile_pic=request.profile_pic or ""
        )
    except DuplicateKeyError:
        # Lost a race with a concurrent registration
        raise HTTPException(status_code=400, detail="User already exists")

    logger.info(f"Registered {user['role']} {user['email']}")
    return RegisterResponse(token=create_user_token(user), user=user)


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    When `role` is sent (the portal the user is logging in from), it must
    match the role the account was registered with.
    """
    user = UserService().get_by_email(request.email)

    if not user or not verify_password(request.password, user["password_hash"]):
        logger.warning(f"Failed login for {request.email}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if request.role and request.role.value != user["role"]:
        logger.warning(f"Role mismatch on login for {user['email']}: requested {request.role.value}")
        raise HTTPException(
            status_code=401,
            detail=f"Access denied. You are registered as a {user['role']}, "
                   f"but trying to login as a {request.role.value}."
        )

    logger.info(f"Successful login: {user['email']}")
    return LoginResponse(
        id=user["id"], name=user["name"], email=user["email"], role=user["role"],
        token=create_user_token(user)
    )


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(user: dict = Depends(get_current_user)):
    """Get current user's profile, completion percentage and suggested next steps."""
    return ProfileResponse(
        user=user,
        profile_completion=profile_completion(user),
        next_steps=NEXT_STEPS[user["role"]]
    )


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_profile(data: ProfileUpdate, user: dict = Depends(get_current_user)):
    """Update profile. Only provided fields are updated; the role never changes."""
    updates = data.model_dump(exclude_none=True)

    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    service = UserService()
    if "email" in updates and service.email_taken(updates["email"], exclude_user_id=user["id"]):
        raise HTTPException(status_code=400, detail="Email already in use")

    if "password" in updates:
        updates["password_hash"] = hash_password(updates.pop("password"))

    try:
        updated = service.update(user["id"], updates)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Email already in use")

    return ProfileUpdateResponse(user=updated, token=create_user_token(updated))
