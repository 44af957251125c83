"""Request-scoped repository manager for every app's repositories."""

from framework.repository.unit_of_work import UnitOfWork
from apps.companies.repository import CompanyRepository
from apps.employees.repository import EmployeeRepository


class RepositoryManager(UnitOfWork):
    """Unit of work exposing one lazily built repository per entity."""

    @property
    def company_repository(self) -> CompanyRepository:
        return self.get_repository(CompanyRepository)

    @property
    def employee_repository(self) -> EmployeeRepository:
        return self.get_repository(EmployeeRepository)
