from apps.repository_manager import RepositoryManager

class EmployeeService:
    """Employee use cases; none are exposed over HTTP yet."""

    def __init__(self, repository: RepositoryManager):
        self.repository = repository
