"""Agent 관련 데이터 모델 정의.

이 모듈은 Agent의 유형, 상태, 능력(Capability) 등을 정의합니다.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class AgentType(str, Enum):
    """Agent 유형. Task를 Agent에 매칭하는 유일한 키입니다."""

    USER_INTERFACE = "user_interface"
    FLIGHT_BOOKING = "flight_booking"
    ACCOMMODATION = "accommodation"
    ITINERARY_PLANNER = "itinerary_planner"
    NOTIFICATION = "notification"
    TRAVEL_SAFETY = "travel_safety"


class AgentStatus(str, Enum):
    """Agent의 현재 상태."""

    ACTIVE = "active"  # Orchestrator에 등록됨
    INACTIVE = "inactive"  # 등록 전


class CapabilityParameter(BaseModel):
    """Capability 파라미터 메타데이터."""

    type: str = Field(..., description="파라미터 타입 (string, number, array 등)")
    description: str = Field(default="", description="파라미터 설명")
    required: bool = Field(default=True, description="필수 여부")
    default: Any = Field(default=None, description="기본값")
    items: dict[str, Any] | None = Field(
        default=None, description="배열 요소 스키마 (type=array인 경우)"
    )

    model_config = {"extra": "forbid"}


class AgentCapability(BaseModel):
    """Agent가 수행할 수 있는 작업(action) 정의.

    탐색(discoverability)용 선언적 메타데이터입니다.
    """

    action: str = Field(..., description="Agent 내에서 고유한 action 이름")
    description: str = Field(..., description="action에 대한 설명")
    parameters: dict[str, CapabilityParameter] = Field(
        default_factory=dict, description="파라미터 이름 → 메타데이터"
    )
    examples: list[dict[str, Any]] = Field(
        default_factory=list, description="사용 예시"
    )

    model_config = {"extra": "forbid"}

    def required_parameters(self) -> list[str]:
        """필수 파라미터 이름 목록 반환."""
        return [name for name, param in self.parameters.items() if param.required]


class AgentInfo(BaseModel):
    """Agent 스냅샷 (읽기 전용)."""

    id: str = Field(..., description="Agent 고유 식별자")
    name: str = Field(..., description="Agent 표시 이름")
    type: AgentType = Field(..., description="Agent 유형")
    capabilities: list[AgentCapability] = Field(
        default_factory=list, description="등록된 capability 목록 (등록 순서)"
    )
    status: AgentStatus = Field(default=AgentStatus.INACTIVE, description="현재 상태")

    model_config = {"extra": "forbid", "frozen": True}

    def get_actions(self) -> list[str]:
        """모든 action 이름 목록 반환."""
        return [cap.action for cap in self.capabilities]
