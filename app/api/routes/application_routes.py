"""
Application Routes

POST /applications/{job_id} - Apply to a job (candidate only)
GET /applications/job/{job_id} - Applicants for a job (job creator only)
GET /applications - My applications
GET /applications/employer/applicants - Applicants across all my jobs
PUT /applications/{application_id}/status - Update status (job creator only)
"""

import logging
from fastapi import APIRouter, HTTPException, Depends
from pymongo.errors import DuplicateKeyError
from typing import List

from app.core.auth import get_current_user, get_current_candidate
from app.services.mongo_service import ApplicationService, JobService
from app.schemas.schemas import ApplicationCreate, ApplicationStatusUpdate, ApplicationResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["Applications"])

ALREADY_APPLIED = "You have already applied for this job"


@router.post("/{job_id}", response_model=ApplicationResponse, status_code=201)
async def apply_to_job(
    job_id: str,
    application: ApplicationCreate,
    candidate: dict = Depends(get_current_candidate)
):
    """Apply to a job. Candidates only. Cannot apply twice to the same job."""
    if not application.resume_link or not application.resume_link.strip():
        raise HTTPException(status_code=400, detail="Resume link is required")

    if not JobService().find(job_id):
        raise HTTPException(status_code=404, detail="Job not found")

    service = ApplicationService()
    if service.exists(job_id, candidate["id"]):
        raise HTTPException(status_code=409, detail=ALREADY_APPLIED)

    try:
        created = service.create(
            job_id=job_id,
            applicant_id=candidate["id"],
            resume_link=application.resume_link.strip(),
            cover_letter=application.cover_letter
        )
    except DuplicateKeyError:
        # A concurrent request for the same pair got there first
        raise HTTPException(status_code=409, detail=ALREADY_APPLIED)

    logger.info(f"{candidate['email']} applied to job {job_id}")
    return created


@router.get("/job/{job_id}", response_model=List[ApplicationResponse])
async def get_job_applicants(job_id: str, user: dict = Depends(get_current_user)):
    """Applications for one job. Only the job's creator can see them."""
    job = JobService().find(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    if job["created_by"] != user["id"]:
        logger.warning(f"User {user['email']} attempted to view applicants of job {job_id}")
        raise HTTPException(status_code=403, detail="Not authorized")

    return ApplicationService().list_for_job(job_id)


@router.get("", response_model=List[ApplicationResponse])
async def get_my_applications(user: dict = Depends(get_current_user)):
    """All applications submitted by the current user, newest first."""
    return ApplicationService().list_for_applicant(user["id"])


@router.get("/employer/applicants", response_model=List[ApplicationResponse])
async def get_employer_applicants(user: dict = Depends(get_current_user)):
    """All applications to jobs the current user created, newest first."""
    job_ids = JobService().ids_created_by(user["id"])
    if not job_ids:
        return []
    return ApplicationService().list_for_jobs(job_ids)


@router.put("/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    user: dict = Depends(get_current_user)
):
    """Move an application to a new status. Only the job's creator can do this."""
    service = ApplicationService()
    application = service.find(application_id)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")

    job = JobService().find(application["job"])
    if not job or job["created_by"] != user["id"]:
        logger.warning(f"User {user['email']} attempted to update application {application_id}")
        raise HTTPException(status_code=403, detail="Not authorized to update this application")

    updated = service.update_status(application_id, update.status.value)
    logger.info(f"Application {application_id} moved to '{update.status.value}' by {user['email']}")
    return updated
