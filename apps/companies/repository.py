"""Company module repository implementation."""

from typing import List, Optional
from framework.repository.base import BaseRepository
from .models import Company


class CompanyRepository(BaseRepository[Company]):
    """Company repository."""

    def __init__(self, session):
        super().__init__(session, Company)

    async def get_all_companies(self, track_changes: bool) -> List[Company]:
        """All companies by name ascending; equal names ordered by id."""
        return await self.find_all(
            track_changes,
            order_by=(Company.name.asc(), Company.id.asc()),
        )

    async def get_company(self, company_id: int, track_changes: bool) -> Optional[Company]:
        """Find company by id."""
        return await self.get_by_id(company_id, track_changes)
