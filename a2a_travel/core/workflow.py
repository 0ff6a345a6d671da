"""Travel-plan workflow.

Sequences the safety, flight and hotel stages of a trip. Each stage waits
for its task's completion signal (bounded by the configured stage
timeout) before the next stage starts.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Any

from pydantic import BaseModel, Field

from a2a_travel.agents.implementations import (
    AccommodationAgent,
    FlightBookingAgent,
    TravelSafetyAgent,
)
from a2a_travel.models import AgentType, Task, TaskPriority
from a2a_travel.services.flights import FlightApiClient
from a2a_travel.services.hotels import HotelApiClient
from a2a_travel.utils.config import AppConfig, WorkflowConfig
from a2a_travel.utils.exceptions import TaskWaitTimeoutError, WorkflowInputError
from a2a_travel.utils.logging import LoggerAdapter

from .orchestrator import Orchestrator


class TravelPlan(BaseModel):
    """여행 계획 워크플로우 결과."""

    workflow_id: str = Field(..., description="워크플로우 식별자")
    tasks: list[Task] = Field(default_factory=list, description="워크플로우에서 생성된 Task")
    safety: Any = Field(default=None, description="안전 점검 결과 데이터")
    flights: Any = Field(default=None, description="항공편 검색 결과 데이터")
    hotels: Any = Field(default=None, description="숙소 검색 결과 데이터")


def build_default_orchestrator(config: AppConfig | None = None) -> Orchestrator:
    """Create an orchestrator with the three travel agents registered.

    Args:
        config: Application configuration; defaults are used if omitted.
    """
    config = config or AppConfig()
    orchestrator = Orchestrator(seed=config.agents.random_seed)
    orchestrator.register_agent(TravelSafetyAgent(settings=config.agents))
    orchestrator.register_agent(
        FlightBookingAgent(
            settings=config.agents, api_client=FlightApiClient(config.flight_api)
        )
    )
    orchestrator.register_agent(
        AccommodationAgent(
            settings=config.agents, api_client=HotelApiClient(config.hotel_api)
        )
    )
    return orchestrator


def _parse_date(field: str, value: str) -> date:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise WorkflowInputError(field, f"{field} must be a YYYY-MM-DD date") from e


def _stage_data(task: Task | None) -> Any:
    if task is None or task.result is None:
        return None
    return task.result.data


class TravelPlanWorkflow:
    """Plans a trip by chaining safety, flight and hotel tasks.

    Flights and hotels are only searched when the destination was not
    found unsafe (a missing or failed safety result does not block them).
    """

    def __init__(
        self,
        orchestrator: Orchestrator | None = None,
        config: WorkflowConfig | None = None,
    ) -> None:
        self.orchestrator = orchestrator or build_default_orchestrator()
        self.config = config or WorkflowConfig()

    async def plan_trip(
        self,
        destination: str,
        departure_date: str,
        return_date: str,
        budget: float,
        departure_city: str | None = None,
        guests: int | None = None,
    ) -> TravelPlan:
        """Run the workflow for one trip.

        Args:
            destination: Destination city or country.
            departure_date: Departure date (YYYY-MM-DD).
            return_date: Return date (YYYY-MM-DD), after the departure date.
            budget: Total trip budget; a share of it caps the nightly price.
            departure_city: City of departure; defaults to the configured city.
            guests: Hotel guests; defaults to the configured number.

        Returns:
            TravelPlan with the tasks of this run and each stage's result data.

        Raises:
            WorkflowInputError: If the input is invalid.
        """
        if not destination or not destination.strip():
            raise WorkflowInputError("destination", "destination is required")
        start = _parse_date("departure_date", departure_date)
        end = _parse_date("return_date", return_date)
        if end <= start:
            raise WorkflowInputError(
                "return_date", "return_date must be after departure_date"
            )
        if budget <= 0:
            raise WorkflowInputError("budget", "budget must be positive")

        departure_city = departure_city or self.config.default_departure_city
        guests = guests or self.config.guests
        workflow_id = str(uuid.uuid4())
        log = LoggerAdapter(__name__, workflow_id=workflow_id, destination=destination)
        existing = {task.id for task in self.orchestrator.get_all_tasks()}

        log.info("Starting travel planning", departure_city=departure_city)

        safety_task = await self._run_stage(
            log,
            title=f"Check safety for {destination}",
            description=f"Check if {destination} has any travel advisories or safety concerns",
            agent_type=AgentType.TRAVEL_SAFETY,
            context={"action": "check_destination_safety", "destination": destination},
            priority=TaskPriority.HIGH,
        )

        flight_task = hotel_task = None
        if self._destination_cleared(safety_task):
            flight_task = await self._run_stage(
                log,
                title=f"Search flights to {destination}",
                description=f"Find flights from {departure_city} to {destination}",
                agent_type=AgentType.FLIGHT_BOOKING,
                context={
                    "action": "search_flights",
                    "departure_city": departure_city,
                    "arrival_city": destination,
                    "departure_date": departure_date,
                    "return_date": return_date,
                    "skip_safety_check": True,
                },
            )

            nights = max((end - start).days, 1)
            max_price = round(budget * self.config.accommodation_share / nights)
            hotel_task = await self._run_stage(
                log,
                title=f"Search hotels in {destination}",
                description=(
                    f"Find available hotels in {destination} "
                    f"for dates {departure_date} to {return_date}"
                ),
                agent_type=AgentType.ACCOMMODATION,
                context={
                    "action": "search_hotels",
                    "location": destination,
                    "check_in": departure_date,
                    "check_out": return_date,
                    "guests": guests,
                    "max_price": max_price,
                    "skip_safety_check": True,
                },
            )
        else:
            log.info("Destination not cleared, skipping flights and hotels")

        tasks = [t for t in self.orchestrator.get_all_tasks() if t.id not in existing]
        log.info("Travel planning finished", tasks=len(tasks))
        return TravelPlan(
            workflow_id=workflow_id,
            tasks=tasks,
            safety=_stage_data(safety_task),
            flights=_stage_data(flight_task),
            hotels=_stage_data(hotel_task),
        )

    async def _run_stage(
        self,
        log: LoggerAdapter,
        title: str,
        description: str,
        agent_type: AgentType,
        context: dict[str, Any],
        priority: TaskPriority = TaskPriority.MEDIUM,
    ) -> Task | None:
        """Create a stage task and wait for it to finish.

        Returns:
            The finished task, or None if it did not finish in time.
        """
        task = self.orchestrator.create_task(
            title, description, agent_type, context, priority
        )
        stage_log = log.bind(task_id=task.id, agent_type=agent_type.value)
        stage_log.info("Stage started", action=context.get("action"))
        try:
            return await self.orchestrator.wait_for_task(
                task.id, self.config.stage_timeout
            )
        except TaskWaitTimeoutError:
            stage_log.warning(
                "Stage did not finish in time",
                status=(self.orchestrator.get_task(task.id) or task).status.value,
            )
            return None

    @staticmethod
    def _destination_cleared(safety_task: Task | None) -> bool:
        if safety_task is None or safety_task.result is None:
            return True
        if not safety_task.result.success:
            return True
        data = safety_task.result.data
        return not (isinstance(data, dict) and data.get("safe") is False)
