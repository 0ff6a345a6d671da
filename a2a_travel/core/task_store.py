"""Task Store - In-memory task table.

This module keeps every task created by an orchestrator and lets
callers await a task's completion.
"""

import asyncio

from a2a_travel.models import Task
from a2a_travel.utils.exceptions import TaskNotFoundError, TaskWaitTimeoutError


class TaskStore:
    """In-memory task table with completion waiters.

    Tasks are never deleted. Waiters are asyncio futures resolved with a
    snapshot of the task when it reaches a terminal status.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}
        self._waiters: dict[str, list[asyncio.Future[Task]]] = {}

    def add(self, task: Task) -> Task:
        """Store a task.

        Raises:
            ValueError: If a task with the same ID is already stored.
        """
        if task.id in self._tasks:
            raise ValueError(f"Task already exists: {task.id}")
        self._tasks[task.id] = task
        return task

    def get(self, task_id: str) -> Task | None:
        """Get the stored task, or None if absent."""
        return self._tasks.get(task_id)

    def require(self, task_id: str) -> Task:
        """Get the stored task.

        Raises:
            TaskNotFoundError: If the task is not found.
        """
        task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def list_all(self) -> list[Task]:
        """All stored tasks in creation order."""
        return list(self._tasks.values())

    def children_of(self, task_id: str) -> list[Task]:
        """Tasks whose parent is ``task_id``, in creation order."""
        return [t for t in self._tasks.values() if t.parent_task_id == task_id]

    async def wait_for(self, task_id: str, timeout: float | None = None) -> Task:
        """Wait until a task reaches a terminal status.

        Args:
            task_id: The task to wait for.
            timeout: Maximum seconds to wait; None waits indefinitely.

        Returns:
            A snapshot of the task in its terminal status.

        Raises:
            TaskNotFoundError: If the task is not found.
            TaskWaitTimeoutError: If the task is not terminal in time.
        """
        task = self.require(task_id)
        if task.is_terminal:
            return task.model_copy(deep=True)

        future: asyncio.Future[Task] = asyncio.get_running_loop().create_future()
        self._waiters.setdefault(task_id, []).append(future)
        try:
            return await asyncio.wait_for(future, timeout)
        except TimeoutError as e:
            raise TaskWaitTimeoutError(task_id, timeout or 0.0) from e
        finally:
            waiters = self._waiters.get(task_id)
            if waiters and future in waiters:
                waiters.remove(future)
                if not waiters:
                    del self._waiters[task_id]

    def notify_terminal(self, task: Task) -> None:
        """Resolve every waiter of a task that has become terminal."""
        for future in self._waiters.pop(task.id, []):
            if not future.done():
                future.set_result(task.model_copy(deep=True))

    def pending_waiters(self, task_id: str) -> int:
        """Number of callers currently waiting on a task."""
        return len(self._waiters.get(task_id, []))

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: str) -> bool:
        return task_id in self._tasks
