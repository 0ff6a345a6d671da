"""Task 관련 데이터 모델 정의.

이 모듈은 Agent 유형에 전달되는 작업 단위(Task)와 그 결과를 정의합니다.
"""

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .agent import AgentType


class TaskStatus(str, Enum):
    """Task 상태.

    pending → in_progress → {completed | failed}
    """

    PENDING = "pending"  # 대기 중 (초기 상태)
    IN_PROGRESS = "in_progress"  # 진행 중
    COMPLETED = "completed"  # 완료 (종료 상태)
    FAILED = "failed"  # 실패 (종료 상태)

    @property
    def is_terminal(self) -> bool:
        """종료 상태 여부."""
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)

    def can_transition_to(self, target: "TaskStatus") -> bool:
        """target 상태로의 전이 가능 여부.

        같은 상태로의 갱신은 허용되며 updated_at만 갱신됩니다.
        """
        if self == target:
            return not self.is_terminal
        return target in _TRANSITIONS[self]


_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.PENDING: frozenset({TaskStatus.IN_PROGRESS}),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.COMPLETED, TaskStatus.FAILED}),
    TaskStatus.COMPLETED: frozenset(),
    TaskStatus.FAILED: frozenset(),
}


class TaskPriority(str, Enum):
    """Task 우선순위 (참고용, 스케줄링에는 사용되지 않음)."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class FollowUpTask(BaseModel):
    """결과에 포함되는 후속 Task 명세.

    비어 있는 필드는 부모 Task에서 상속되거나 기본값이 사용됩니다.
    """

    title: str | None = Field(default=None, description="Task 제목")
    description: str | None = Field(default=None, description="Task 설명")
    agent_type: AgentType | None = Field(default=None, description="대상 Agent 유형")
    priority: TaskPriority | None = Field(default=None, description="우선순위")
    context: dict[str, Any] = Field(
        default_factory=dict, description="action 및 파라미터"
    )

    model_config = {"extra": "forbid"}


class TaskResult(BaseModel):
    """Task 실행 결과."""

    success: bool = Field(..., description="성공 여부")
    data: Any = Field(default=None, description="결과 데이터")
    error: str | None = Field(default=None, description="에러 메시지 (실패 시)")
    next_tasks: list[FollowUpTask] = Field(
        default_factory=list, description="후속 Task 목록"
    )

    model_config = {"extra": "forbid"}

    @classmethod
    def ok(
        cls, data: Any = None, next_tasks: list[FollowUpTask] | None = None
    ) -> "TaskResult":
        """성공 결과 생성 헬퍼."""
        return cls(success=True, data=data, next_tasks=next_tasks or [])

    @classmethod
    def fail(cls, error: str) -> "TaskResult":
        """실패 결과 생성 헬퍼."""
        return cls(success=False, error=error)


def _now() -> datetime:
    return datetime.now(UTC)


class Task(BaseModel):
    """작업 단위.

    id와 agent_type은 생성 이후 변경할 수 없습니다.
    """

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        frozen=True,
        description="Task 고유 식별자",
    )
    title: str = Field(..., description="Task 제목")
    description: str = Field(default="", description="Task 설명")
    agent_type: AgentType = Field(..., frozen=True, description="대상 Agent 유형")
    assigned_agent_id: str | None = Field(default=None, description="할당된 Agent ID")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Task 상태")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="우선순위")
    created_at: datetime = Field(default_factory=_now, description="생성 시간")
    updated_at: datetime = Field(default_factory=_now, description="최종 갱신 시간")
    completed_at: datetime | None = Field(default=None, description="완료 시간")
    context: dict[str, Any] = Field(
        default_factory=dict, description="action 이름과 action별 파라미터"
    )
    parent_task_id: str | None = Field(default=None, description="부모 Task ID")
    result: TaskResult | None = Field(default=None, description="실행 결과")

    model_config = {"extra": "forbid"}

    @property
    def action(self) -> str | None:
        """context에 지정된 action 이름."""
        return self.context.get("action")

    @property
    def is_terminal(self) -> bool:
        """종료 상태 여부."""
        return self.status.is_terminal

    def touch(self) -> None:
        """updated_at 갱신."""
        self.updated_at = _now()

    def mark_assigned(self, agent_id: str) -> None:
        """Agent 할당 및 진행 중 표시."""
        self.assigned_agent_id = agent_id
        self.status = TaskStatus.IN_PROGRESS
        self.touch()

    def mark_completed(self, result: TaskResult | None = None) -> None:
        """Task 완료 표시."""
        self.status = TaskStatus.COMPLETED
        self.touch()
        if result is not None:
            self.result = result
            self.completed_at = self.updated_at

    def mark_failed(self, result: TaskResult | None = None) -> None:
        """Task 실패 표시."""
        self.status = TaskStatus.FAILED
        self.touch()
        if result is not None:
            self.result = result
            self.completed_at = self.updated_at
