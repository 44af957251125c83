from typing import List
from framework.exceptions.handler import NotFoundError
from apps.repository_manager import RepositoryManager
from .models import Company

class CompanyService:
    def __init__(self, repository: RepositoryManager):
        """Initialize Company Service with the request's RepositoryManager."""
        self.repository = repository

    async def get_all_companies(self, track_changes: bool) -> List[Company]:
        return await self.repository.company_repository.get_all_companies(track_changes)

    async def get_company(self, company_id: int, track_changes: bool) -> Company:
        """Get one company; raises NotFoundError when absent."""
        company = await self.repository.company_repository.get_company(company_id, track_changes)
        if company is None:
            raise NotFoundError("Company", company_id)
        return company
