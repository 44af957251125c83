"""Repository manager: lazy repositories, atomic save, request isolation."""
import pytest
from sqlalchemy.exc import OperationalError

from apps.companies.models import Company
from apps.companies.repository import CompanyRepository
from apps.employees.repository import EmployeeRepository
from apps.repository_manager import RepositoryManager
from framework.exceptions.handler import ErrorKind, PersistenceError


@pytest.mark.asyncio
async def test_repositories_are_built_on_first_access(repository_manager: RepositoryManager):
    assert repository_manager._repositories == {}

    company_repository = repository_manager.company_repository

    assert isinstance(company_repository, CompanyRepository)
    assert repository_manager.company_repository is company_repository
    assert list(repository_manager._repositories) == [CompanyRepository]


@pytest.mark.asyncio
async def test_repositories_share_the_manager_session(repository_manager: RepositoryManager):
    assert isinstance(repository_manager.employee_repository, EmployeeRepository)
    assert repository_manager.company_repository.session is repository_manager.session
    assert repository_manager.employee_repository.session is repository_manager.session


@pytest.mark.asyncio
async def test_save_commits_across_repositories(session_factory, employee_factory):
    async with session_factory() as session:
        manager = RepositoryManager(session)
        company = await manager.company_repository.create(
            Company(name="IT_Solutions Ltd", address="583 Wall Dr.", country="USA")
        )
        await manager.flush()
        await manager.employee_repository.create(employee_factory(company.id))
        await manager.save()

    async with session_factory() as session:
        manager = RepositoryManager(session)
        assert len(await manager.company_repository.find_all(track_changes=False)) == 1
        assert len(await manager.employee_repository.find_all(track_changes=False)) == 1


@pytest.mark.asyncio
async def test_update_and_delete_apply_on_save(session_factory, seeded_companies):
    async with session_factory() as session:
        manager = RepositoryManager(session)
        c1, c2 = await manager.company_repository.get_all_companies(track_changes=True)
        c1.country = "MX"
        await manager.company_repository.update(c1)
        await manager.company_repository.delete(c2)
        await manager.save()

    async with session_factory() as session:
        remaining = await RepositoryManager(session).company_repository.find_all(track_changes=False)
    assert [(c.name, c.country) for c in remaining] == [("C1", "MX")]


@pytest.mark.asyncio
async def test_failed_save_leaves_store_unchanged(session_factory, seeded_companies, employee_factory):
    async with session_factory() as session:
        manager = RepositoryManager(session)
        await manager.company_repository.create(Company(name="Ghost", address="Nowhere", country="XX"))
        # age outside the allowed range violates the check constraint
        await manager.employee_repository.create(employee_factory(seeded_companies[0].id, age=0))

        with pytest.raises(PersistenceError) as exc_info:
            await manager.save()

    assert exc_info.value.kind is ErrorKind.PERSISTENCE
    assert exc_info.value.operation == "save"
    assert exc_info.value.entity_types == ("Company", "Employee")

    async with session_factory() as session:
        manager = RepositoryManager(session)
        names = [c.name for c in await manager.company_repository.get_all_companies(track_changes=False)]
        employees = await manager.employee_repository.find_all(track_changes=False)
    assert names == ["C1", "C2"]
    assert employees == []


@pytest.mark.asyncio
async def test_employee_must_reference_existing_company(session_factory, employee_factory):
    async with session_factory() as session:
        manager = RepositoryManager(session)
        await manager.employee_repository.create(employee_factory(999))

        with pytest.raises(PersistenceError) as exc_info:
            await manager.save()

    assert exc_info.value.entity_types == ("Employee",)

    async with session_factory() as session:
        employees = await RepositoryManager(session).employee_repository.find_all(track_changes=False)
    assert employees == []


@pytest.mark.asyncio
async def test_failed_save_reports_entities_flushed_earlier(session_factory, employee_factory, log_records):
    async with session_factory() as session:
        manager = RepositoryManager(session)
        company = await manager.company_repository.create(Company(name="Flushed", address="F1", country="US"))
        await manager.flush()
        await manager.employee_repository.create(employee_factory(company.id, age=0))

        with pytest.raises(PersistenceError) as exc_info:
            await manager.save()

    assert exc_info.value.entity_types == ("Company", "Employee")
    save_records = [r for r in log_records if r["extra"].get("operation") == "save"]
    assert len(save_records) == 1
    assert save_records[0]["extra"]["entity_types"] == ["Company", "Employee"]
    assert "CHECK constraint failed" in save_records[0]["extra"]["error_detail"]


@pytest.mark.asyncio
async def test_failed_rollback_still_raises_persistence_error(
    session_factory, seeded_companies, employee_factory, log_records, monkeypatch
):
    async def _broken_rollback():
        raise OperationalError("ROLLBACK", {}, Exception("connection lost"))

    async with session_factory() as session:
        manager = RepositoryManager(session)
        await manager.employee_repository.create(employee_factory(seeded_companies[0].id, age=0))
        monkeypatch.setattr(session, "rollback", _broken_rollback)

        with pytest.raises(PersistenceError) as exc_info:
            await manager.save()
        monkeypatch.undo()

    assert exc_info.value.operation == "save"
    operations = [r["extra"].get("operation") for r in log_records]
    assert "save" in operations
    assert "rollback" in operations


@pytest.mark.asyncio
async def test_staged_types_reset_after_save(session_factory):
    async with session_factory() as session:
        manager = RepositoryManager(session)
        await manager.company_repository.create(Company(name="Once", address="O1", country="US"))
        await manager.save()

        assert manager._staged_entity_types() == ()


@pytest.mark.asyncio
async def test_uncommitted_changes_are_private_to_their_manager(session_factory):
    async with session_factory() as session_a, session_factory() as session_b:
        manager_a = RepositoryManager(session_a)
        manager_b = RepositoryManager(session_b)

        await manager_a.company_repository.create(Company(name="Private", address="P1", country="US"))

        assert await manager_b.company_repository.find_all(track_changes=False) == []
        assert manager_a.company_repository is not manager_b.company_repository

        await manager_a.rollback()


@pytest.mark.asyncio
async def test_context_manager_rolls_back_on_error(session_factory):
    async with session_factory() as session:
        with pytest.raises(RuntimeError):
            async with RepositoryManager(session) as manager:
                await manager.company_repository.create(Company(name="Doomed", address="D1", country="US"))
                raise RuntimeError("abort")

    async with session_factory() as session:
        assert await RepositoryManager(session).company_repository.find_all(track_changes=False) == []


@pytest.mark.asyncio
async def test_context_manager_saves_on_success(session_factory):
    async with session_factory() as session:
        async with RepositoryManager(session) as manager:
            await manager.company_repository.create(Company(name="Kept", address="K1", country="US"))

    async with session_factory() as session:
        companies = await RepositoryManager(session).company_repository.find_all(track_changes=False)
    assert [c.name for c in companies] == ["Kept"]


def test_manager_requires_a_session():
    with pytest.raises(ValueError):
        RepositoryManager(session=None)
