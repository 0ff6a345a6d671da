"""메시지 관련 데이터 모델 정의.

이 모듈은 Agent와 Orchestrator 간 통신에 사용되는 메시지 봉투(envelope)를 정의합니다.
"""

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

ORCHESTRATOR_ID = "orchestrator"


class MessageType(str, Enum):
    """메시지 유형."""

    TASK_ASSIGNMENT = "task_assignment"  # 작업 할당
    TASK_UPDATE = "task_update"  # 상태 갱신
    TASK_COMPLETED = "task_completed"  # 작업 완료
    INFORMATION_REQUEST = "information_request"  # 정보 조회 요청
    INFORMATION_RESPONSE = "information_response"  # 정보 조회 응답


class AgentMessage(BaseModel):
    """Agent 간 통신 메시지.

    from_agent_id / to_agent_id는 Agent ID 또는 "orchestrator"입니다.
    """

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()), description="메시지 고유 식별자"
    )
    from_agent_id: str = Field(..., description="발신자 ID")
    to_agent_id: str = Field(..., description="수신자 ID")
    type: MessageType = Field(..., description="메시지 유형")
    content: dict[str, Any] = Field(default_factory=dict, description="메시지 내용")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="메시지 생성 시간"
    )
    task_id: str | None = Field(default=None, description="관련 Task ID")
    correlation_id: str | None = Field(
        default=None, description="응답 대상 information_request 메시지 ID"
    )

    model_config = {"extra": "forbid"}

    @classmethod
    def task_assignment(
        cls, to_agent_id: str, task: Any, task_id: str
    ) -> "AgentMessage":
        """작업 할당 메시지 생성 헬퍼."""
        return cls(
            from_agent_id=ORCHESTRATOR_ID,
            to_agent_id=to_agent_id,
            type=MessageType.TASK_ASSIGNMENT,
            content={"task": task},
            task_id=task_id,
        )

    @classmethod
    def information_response(
        cls,
        request: "AgentMessage",
        from_agent_id: str,
        content: dict[str, Any],
    ) -> "AgentMessage":
        """information_request에 대한 응답 메시지 생성 헬퍼."""
        return cls(
            from_agent_id=from_agent_id,
            to_agent_id=request.from_agent_id,
            type=MessageType.INFORMATION_RESPONSE,
            content=content,
            task_id=request.task_id,
            correlation_id=request.id,
        )

    def is_for_orchestrator(self) -> bool:
        """Orchestrator 수신 메시지 여부 확인."""
        return self.to_agent_id == ORCHESTRATOR_ID

    def is_response_to(self, message: "AgentMessage") -> bool:
        """특정 요청에 대한 응답인지 확인."""
        return (
            self.type == MessageType.INFORMATION_RESPONSE
            and self.correlation_id == message.id
        )
