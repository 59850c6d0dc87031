"""Unit tests for MigrationRunnerWorker"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from src.worker.migration_runner import MigrationRunnerWorker
from src.app.use_cases.migration import BatchMigrationResultDTO, MigrationErrorDTO


def session_factory():
    mock_session = MagicMock()
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=mock_session)


def ok_result(value):
    result = MagicMock()
    result.is_err.return_value = False
    result.value = value
    return result


@pytest.mark.asyncio
class TestMigrationRunnerWorker:
    @patch("src.worker.migration_runner.ApplicationConfig")
    @patch("src.worker.migration_runner.MigrateOwnerRentals")
    @patch("src.worker.migration_runner.build_record_repositories")
    @patch("src.worker.migration_runner.SqlAlchemyRentalRepository")
    @patch("src.worker.migration_runner.SqlAlchemyUnitOfWork")
    @patch("src.worker.migration_runner.create_async_engine")
    @patch("src.worker.migration_runner.sessionmaker")
    async def test_run_once_returns_partial_batch(
        self,
        mock_sessionmaker,
        mock_create_engine,
        mock_uow_class,
        mock_rental_repo_class,
        mock_build_repos,
        mock_use_case_class,
        mock_app_config,
    ):
        """
        Given: The batch stops at rental B
        When: The runner migrates the owner
        Then: The partial batch is returned for the operator to retry B
        """
        mock_app_config.MIGRATION_ENABLED = True
        mock_sessionmaker.return_value = session_factory()
        batch = BatchMigrationResultDTO(
            owner_id="owner_1",
            total_unmigrated=3,
            migrated_rental_ids=["A"],
            failed_rental_id="B",
            error=MigrationErrorDTO(
                code="PARTIAL_MIGRATION", message="stopped", reason="MIGRATION_FAILED: bad"
            ),
            remaining_rental_ids=["C"],
            completed=False,
        )
        mock_use_case = MagicMock()
        mock_use_case.execute = AsyncMock(return_value=ok_result(batch))
        mock_use_case_class.return_value = mock_use_case

        worker = MigrationRunnerWorker(db_uri="sqlite+aiosqlite:///:memory:")
        result = await worker.run_once("owner_1")

        assert result.failed_rental_id == "B"
        assert result.remaining_rental_ids == ["C"]
        args, kwargs = mock_use_case.execute.call_args
        assert args == ("owner_1",)
        assert kwargs["on_progress"] == worker._log_progress

    @patch("src.worker.migration_runner.ApplicationConfig")
    @patch("src.worker.migration_runner.create_async_engine")
    async def test_run_once_skips_when_disabled(self, mock_create_engine, mock_app_config):
        mock_app_config.MIGRATION_ENABLED = False

        worker = MigrationRunnerWorker(db_uri="sqlite+aiosqlite:///:memory:")

        assert await worker.run_once("owner_1") is None

    @patch("src.worker.migration_runner.ListUnmigratedRentals")
    @patch("src.worker.migration_runner.SqlAlchemyRentalRepository")
    @patch("src.worker.migration_runner.SqlAlchemyUnitOfWork")
    @patch("src.worker.migration_runner.create_async_engine")
    @patch("src.worker.migration_runner.sessionmaker")
    async def test_list_pending_raises_on_error(
        self,
        mock_sessionmaker,
        mock_create_engine,
        mock_uow_class,
        mock_rental_repo_class,
        mock_use_case_class,
    ):
        mock_sessionmaker.return_value = session_factory()
        mock_error = MagicMock()
        mock_error.message = "No authenticated owner for this operation"
        mock_result = MagicMock()
        mock_result.is_err.return_value = True
        mock_result.error = mock_error
        mock_use_case = MagicMock()
        mock_use_case.execute = AsyncMock(return_value=mock_result)
        mock_use_case_class.return_value = mock_use_case

        worker = MigrationRunnerWorker(db_uri="sqlite+aiosqlite:///:memory:")
        with pytest.raises(RuntimeError, match="Listing unmigrated rentals failed"):
            await worker.list_pending("")
