"""
Company Routes

POST /companies - Register a company (employer only)
GET /companies - List all companies
GET /companies/{company_id} - Get company details
"""

import logging
from fastapi import APIRouter, HTTPException, Depends
from pymongo.errors import DuplicateKeyError
from typing import List

from app.core.auth import get_current_employer
from app.services.mongo_service import CompanyService
from app.schemas.schemas import CompanyCreate, CompanyResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("", response_model=CompanyResponse, status_code=201)
async def register_company(data: CompanyCreate, employer: dict = Depends(get_current_employer)):
    """Register a company owned by the current employer. Company names are unique."""
    service = CompanyService()
    if service.get_by_name(data.name):
        raise HTTPException(status_code=400, detail="Company already exists")

    try:
        company = service.create(
            user_id=employer["id"],
            name=data.name,
            description=data.description,
            website=data.website,
            location=data.location,
            logo=data.logo
        )
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Company already exists")

    logger.info(f"Company '{company['name']}' registered by {employer['email']}")
    return company


@router.get("", response_model=List[CompanyResponse])
async def list_companies():
    """List all companies with their owner's name."""
    return CompanyService().list()


@router.get("/{company_id}", response_model=CompanyResponse)
async def get_company(company_id: str):
    """Get details of a specific company."""
    company = CompanyService().get(company_id)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    return company
