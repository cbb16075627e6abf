"""
Job Routes

GET /jobs - List jobs with search & filters
GET /jobs/count - Count jobs (optionally posted in the last N days)
POST /jobs - Create job posting (employer only)
GET /jobs/{job_id} - Get job details
PUT /jobs/{job_id} - Update job (creator only)
DELETE /jobs/{job_id} - Delete job (creator only)
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, Query
from typing import List, Optional

from app.core.auth import get_current_user, get_current_employer
from app.services.mongo_service import JobService, CompanyService, ApplicationService, to_object_id
from app.schemas.schemas import (
    JobCreate, JobUpdate, JobResponse, JobCountResponse, JobType, MessageResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def get_owned_job(job_id: str, user: dict) -> dict:
    """Load a job and make sure the user created it (404 / 403 otherwise)."""
    job = JobService().find(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    if job["created_by"] != user["id"]:
        logger.warning(f"User {user['email']} attempted to modify job {job_id}")
        raise HTTPException(status_code=403, detail="Not authorized to modify this job")
    return job


def check_company_owner(company_id: str, employer: dict) -> None:
    """Jobs may only link a company the employer owns (404 / 403 otherwise)."""
    company = CompanyService().find(company_id)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    if company["user_id"] != employer["id"]:
        raise HTTPException(status_code=403, detail="You can only post jobs for your own company")


@router.get("", response_model=List[JobResponse])
async def list_jobs(
    keyword: Optional[str] = Query(None, description="Search in title and description"),
    location: Optional[str] = Query(None),
    type: Optional[JobType] = Query(None),
    company: Optional[str] = Query(None, description="Company id")
):
    """List job postings, newest first."""
    return JobService().list(
        keyword=keyword,
        location=location,
        job_type=type.value if type else None,
        company=company
    )


@router.get("/count", response_model=JobCountResponse)
async def get_job_count(days: Optional[int] = Query(None, ge=0, description="Only jobs from the last N days")):
    """Job count for dashboard stats."""
    return JobCountResponse(count=JobService().count(days))


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(job: JobCreate, employer: dict = Depends(get_current_employer)):
    """
    Create a new job posting. Only employers can create jobs.

    The free-text companyName is always stored. Linking a Company document
    is optional and only allowed for a company the employer owns.
    """
    if job.company:
        check_company_owner(job.company, employer)

    created = JobService().create(
        created_by=employer["id"],
        title=job.title,
        description=job.description,
        salary=job.salary,
        location=job.location,
        job_type=job.type.value,
        company_name=job.company_name,
        company_id=job.company
    )

    logger.info(f"Job '{created['title']}' posted by {employer['email']}")
    return created


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: str):
    """Get details of a specific job."""
    job = JobService().get(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(job_id: str, update: JobUpdate, user: dict = Depends(get_current_user)):
    """
    Update a job posting. Only the creator can update.

    A company id re-links the job (same ownership rule as create);
    an empty string unlinks it.
    """
    get_owned_job(job_id, user)

    updates = update.model_dump(exclude_none=True, mode="json")
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    if "company" in updates:
        if updates["company"]:
            check_company_owner(updates["company"], user)
            updates["company"] = to_object_id(updates["company"])
        else:
            updates["company"] = None

    return JobService().update(job_id, updates)


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(job_id: str, user: dict = Depends(get_current_user)):
    """Delete a job posting. Cascades to its applications."""
    get_owned_job(job_id, user)

    JobService().delete(job_id)
    removed = ApplicationService().delete_for_job(job_id)

    logger.info(f"Job {job_id} deleted by {user['email']} ({removed} applications removed)")
    return MessageResponse(message="Job deleted successfully")
