"""Task Store unit tests."""

import asyncio

import pytest

from a2a_travel.core.task_store import TaskStore
from a2a_travel.models import AgentType, Task, TaskResult
from a2a_travel.utils.exceptions import TaskNotFoundError, TaskWaitTimeoutError


def create_task(parent_task_id: str | None = None) -> Task:
    """Helper to create test tasks."""
    return Task(
        title="Search hotels",
        agent_type=AgentType.ACCOMMODATION,
        parent_task_id=parent_task_id,
    )


class TestTaskStore:
    """Test TaskStore class."""

    @pytest.fixture
    def store(self):
        return TaskStore()

    def test_add_and_get(self, store):
        """Test storing and reading tasks."""
        task = store.add(create_task())

        assert store.get(task.id) is task
        assert store.require(task.id) is task
        assert task.id in store
        assert len(store) == 1

    def test_add_duplicate(self, store):
        """Test storing the same id twice raises error."""
        task = store.add(create_task())

        with pytest.raises(ValueError):
            store.add(task)

    def test_missing_task(self, store):
        """Test missing tasks."""
        assert store.get("missing") is None
        with pytest.raises(TaskNotFoundError) as exc_info:
            store.require("missing")
        assert exc_info.value.task_id == "missing"

    def test_children_in_creation_order(self, store):
        """Test follow-up lookup by parent."""
        parent = store.add(create_task())
        first = store.add(create_task(parent.id))
        store.add(create_task())
        second = store.add(create_task(parent.id))

        assert store.children_of(parent.id) == [first, second]
        assert store.list_all()[0] is parent

    @pytest.mark.asyncio
    async def test_wait_for_terminal_task_returns_immediately(self, store):
        """Test waiting on a finished task."""
        task = store.add(create_task())
        task.mark_completed(TaskResult.ok({"hotels": []}))

        snapshot = await store.wait_for(task.id, timeout=0.1)

        assert snapshot.is_terminal
        assert snapshot is not task

    @pytest.mark.asyncio
    async def test_wait_for_is_resolved_by_notify(self, store):
        """Test waiters are resolved when the task finishes."""
        task = store.add(create_task())
        waiter = asyncio.create_task(store.wait_for(task.id, timeout=1.0))
        await asyncio.sleep(0)
        assert store.pending_waiters(task.id) == 1

        task.mark_failed(TaskResult.fail("boom"))
        store.notify_terminal(task)
        snapshot = await waiter

        assert snapshot.result.error == "boom"
        assert store.pending_waiters(task.id) == 0

    @pytest.mark.asyncio
    async def test_wait_for_timeout(self, store):
        """Test waiting on an unfinished task times out."""
        task = store.add(create_task())

        with pytest.raises(TaskWaitTimeoutError) as exc_info:
            await store.wait_for(task.id, timeout=0.01)

        assert exc_info.value.task_id == task.id
        assert store.pending_waiters(task.id) == 0

    @pytest.mark.asyncio
    async def test_wait_for_unknown_task(self, store):
        """Test waiting on an unknown task raises error."""
        with pytest.raises(TaskNotFoundError):
            await store.wait_for("missing", timeout=0.01)
