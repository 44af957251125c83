from typing import List
from fastapi import APIRouter, Depends
from apps.service_manager import ServiceManager, get_service_manager
from ..models import Company

router = APIRouter()

@router.get("", response_model=List[Company])
async def get_companies(
    services: ServiceManager = Depends(get_service_manager)
):
    """List all companies ordered by name."""
    return await services.company_service.get_all_companies(track_changes=False)

@router.get("/{company_id}", response_model=Company)
async def get_company(
    company_id: int,
    services: ServiceManager = Depends(get_service_manager)
):
    """Get one company by id."""
    return await services.company_service.get_company(company_id, track_changes=False)
