"""
Schemas module - request/response validation models.
"""
from app.schemas.schemas import (
    UserRole, JobType, ApplicationStatus,
    UserResponse, JobResponse, CompanyResponse,
    ApplicationResponse, PostResponse, CommentResponse, MessageResponse
)

__all__ = [
    "UserRole", "JobType", "ApplicationStatus",
    "UserResponse", "JobResponse", "CompanyResponse",
    "ApplicationResponse", "PostResponse", "CommentResponse", "MessageResponse"
]
