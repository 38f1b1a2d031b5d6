"""Tests for the database-backed task service."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from task_api.core.exceptions import (
    DatabaseError,
    NotConfiguredError,
    ValidationError,
)
from task_api.services.task_service import DatabaseTaskService


class TestDatabaseTaskService:
    """Test cases for DatabaseTaskService on SQLite."""

    def test_create_then_get_returns_same_task(self, task_service):
        created = task_service.create_task("Ship it", "before Friday")

        fetched = task_service.get_task(created.id)

        assert fetched is not None
        assert fetched.id == created.id
        assert fetched.title == "Ship it"
        assert fetched.description == "before Friday"
        assert fetched.completed is False
        assert fetched.created_at is not None
        assert fetched.updated_at is not None

    def test_create_defaults_description(self, task_service):
        task = task_service.create_task("No details", None)

        assert task.description == ""

    @pytest.mark.parametrize("title", [None, "", "   "])
    def test_create_requires_title(self, task_service, title):
        with pytest.raises(ValidationError, match="Title is required"):
            task_service.create_task(title)

        assert task_service.list_tasks() == []

    def test_list_empty(self, task_service):
        assert task_service.list_tasks() == []

    def test_list_newest_first(self, task_service):
        ids = [task_service.create_task(f"task {i}").id for i in range(3)]

        assert [t.id for t in task_service.list_tasks()] == ids[::-1]

    def test_get_missing_returns_none(self, task_service):
        assert task_service.get_task(999) is None

    def test_update_replaces_all_fields(self, task_service):
        task = task_service.create_task("Draft", "notes")

        updated = task_service.update_task(task.id, "Final", None, True)

        assert updated.id == task.id
        assert updated.title == "Final"
        assert updated.description == ""
        assert updated.completed is True
        assert updated.updated_at >= task.updated_at

        fetched = task_service.get_task(task.id)
        assert fetched.title == "Final"
        assert fetched.completed is True

    def test_update_requires_title(self, task_service):
        task = task_service.create_task("Keep me")

        with pytest.raises(ValidationError):
            task_service.update_task(task.id, "", "", True)

        assert task_service.get_task(task.id).title == "Keep me"

    def test_update_missing_leaves_store_unchanged(self, task_service):
        task = task_service.create_task("Only one")

        assert task_service.update_task(task.id + 1, "Ghost", "", True) is None

        tasks = task_service.list_tasks()
        assert len(tasks) == 1
        assert tasks[0].title == "Only one"
        assert tasks[0].completed is False

    def test_delete_returns_record_then_not_found(self, task_service):
        task = task_service.create_task("Temporary")

        deleted = task_service.delete_task(task.id)

        assert deleted.id == task.id
        assert deleted.title == "Temporary"
        assert task_service.get_task(task.id) is None
        assert task_service.delete_task(task.id) is None

    def test_initialize_schema_is_idempotent(self, task_service):
        task_service.create_task("Survives")

        task_service.initialize_schema()

        assert len(task_service.list_tasks()) == 1

    def test_check_connection(self, task_service):
        assert task_service.check_connection() is True

    def test_sqlalchemy_errors_become_database_errors(self, task_service):
        error = OperationalError("SELECT", {}, Exception("database is down"))
        with patch(
            "task_api.services.task_service.TaskRepository.get_all",
            side_effect=error,
        ):
            with pytest.raises(DatabaseError, match="database is down"):
                task_service.list_tasks()


class TestUnconfiguredDatabaseTaskService:
    """Without a URL nothing touches a database."""

    @pytest.fixture
    def service(self):
        with patch(
            "task_api.services.task_service.create_db_engine"
        ) as mock_create_engine:
            service = DatabaseTaskService(None)
        mock_create_engine.assert_not_called()
        return service

    def test_not_configured(self, service):
        assert service.is_configured is False
        assert service.engine is None
        assert service.check_connection() is False

    @pytest.mark.parametrize(
        "operation, args",
        [
            ("list_tasks", ()),
            ("get_task", (1,)),
            ("create_task", ("Title",)),
            ("update_task", (1, "Title", "", False)),
            ("delete_task", (1,)),
            ("initialize_schema", ()),
        ],
    )
    def test_operations_fail_fast(self, service, operation, args):
        with pytest.raises(NotConfiguredError, match="Database not configured"):
            getattr(service, operation)(*args)

    def test_not_configured_reported_before_missing_title(self, service):
        with pytest.raises(NotConfiguredError):
            service.create_task("")

    def test_close_is_safe(self, service):
        service.close()

    def test_invalid_url_leaves_service_unconfigured(self):
        service = DatabaseTaskService("not a database url")

        assert service.is_configured is False
        with pytest.raises(NotConfiguredError):
            service.list_tasks()
