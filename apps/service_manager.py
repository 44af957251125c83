"""Service facade and the request-scoped dependencies that assemble it."""

from dataclasses import dataclass
from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.database.manager import DatabaseManager
from apps.repository_manager import RepositoryManager
from apps.companies.service import CompanyService
from apps.employees.service import EmployeeService


@dataclass(frozen=True)
class ServiceManager:
    """Immutable bundle of the services for one request."""
    company_service: CompanyService
    employee_service: EmployeeService

    @classmethod
    def from_repository_manager(cls, repository: RepositoryManager) -> "ServiceManager":
        return cls(
            company_service=CompanyService(repository),
            employee_service=EmployeeService(repository),
        )


async def get_db():
    """Get database session."""
    manager = DatabaseManager.get_instance()
    async for session in manager.sql.get_session():
        yield session


def get_repository_manager(
    db: AsyncSession = Depends(get_db)
) -> RepositoryManager:
    """Dependency: create RepositoryManager."""
    return RepositoryManager(session=db)


def get_service_manager(
    repository: RepositoryManager = Depends(get_repository_manager)
) -> ServiceManager:
    """Dependency: create ServiceManager."""
    return ServiceManager.from_repository_manager(repository)
