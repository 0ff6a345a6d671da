"""테스트 공통 설정 및 fixtures."""

from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio

from a2a_travel.agents import AccommodationAgent, FlightBookingAgent, TravelSafetyAgent
from a2a_travel.core import AgentRegistry, InMemoryMessageBus, Orchestrator, TaskStore
from a2a_travel.utils.config import AgentSettings, reset_config


@pytest.fixture(autouse=True)
def clean_config() -> Generator[None, None, None]:
    """전역 설정 초기화 fixture."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def agent_settings() -> AgentSettings:
    """테스트용 Agent 설정 fixture (짧은 응답 대기 시간)."""
    return AgentSettings(information_request_timeout=0.5)


@pytest.fixture
def registry() -> AgentRegistry:
    """AgentRegistry fixture."""
    return AgentRegistry()


@pytest.fixture
def message_bus() -> InMemoryMessageBus:
    """MessageBus fixture."""
    return InMemoryMessageBus(max_history=100)


@pytest.fixture
def task_store() -> TaskStore:
    """TaskStore fixture."""
    return TaskStore()


@pytest.fixture
def orchestrator(
    registry: AgentRegistry,
    message_bus: InMemoryMessageBus,
    task_store: TaskStore,
) -> Orchestrator:
    """Orchestrator fixture."""
    return Orchestrator(
        registry=registry,
        message_bus=message_bus,
        task_store=task_store,
        seed=42,
    )


@pytest.fixture
def safety_agent(agent_settings: AgentSettings) -> TravelSafetyAgent:
    """TravelSafetyAgent fixture (미등록)."""
    return TravelSafetyAgent(settings=agent_settings)


@pytest.fixture
def flight_agent(agent_settings: AgentSettings) -> FlightBookingAgent:
    """FlightBookingAgent fixture (미등록)."""
    return FlightBookingAgent(settings=agent_settings)


@pytest.fixture
def accommodation_agent(agent_settings: AgentSettings) -> AccommodationAgent:
    """AccommodationAgent fixture (미등록)."""
    return AccommodationAgent(settings=agent_settings)


@pytest_asyncio.fixture
async def travel_orchestrator(
    orchestrator: Orchestrator,
    safety_agent: TravelSafetyAgent,
    flight_agent: FlightBookingAgent,
    accommodation_agent: AccommodationAgent,
) -> AsyncGenerator[Orchestrator, None]:
    """세 가지 여행 Agent가 모두 등록된 Orchestrator fixture."""
    orchestrator.register_agent(safety_agent)
    orchestrator.register_agent(flight_agent)
    orchestrator.register_agent(accommodation_agent)
    yield orchestrator
    await orchestrator.drain()
