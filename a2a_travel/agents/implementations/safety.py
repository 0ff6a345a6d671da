"""Travel Safety Agent - destination advisories, sanctions and alternatives.

All data comes from the in-memory advisory table, so every action and
query of this agent is deterministic.
"""

from typing import Any

from a2a_travel.agents.base import ActionAgent
from a2a_travel.models import AgentCapability, AgentType, CapabilityParameter, Task, TaskResult
from a2a_travel.services import safety
from a2a_travel.utils.config import AgentSettings


class TravelSafetyAgent(ActionAgent):
    """Agent answering travel safety questions."""

    def __init__(
        self,
        name: str = "Travel Safety Agent",
        settings: AgentSettings | None = None,
    ) -> None:
        super().__init__(name, AgentType.TRAVEL_SAFETY, settings)
        self._register_handlers()

    def _register_handlers(self) -> None:
        self.register_action(
            AgentCapability(
                action="check_destination_safety",
                description="Check if a destination has any travel advisories or safety concerns",
                parameters={
                    "destination": CapabilityParameter(
                        type="string", description="The name of the destination to check"
                    )
                },
                examples=[
                    {
                        "destination": "Ukraine",
                        "result": {
                            "safe": False,
                            "advisory": {
                                "level": "do_not_travel",
                                "reason": ["war", "armed conflict"],
                            },
                        },
                    }
                ],
            ),
            self._check_destination_safety,
        )
        self.register_action(
            AgentCapability(
                action="get_high_risk_destinations",
                description="Get a list of all destinations with severe travel warnings",
                examples=[{"result": {"destinations": ["Ukraine", "Syria", "Yemen"]}}],
            ),
            self._get_high_risk_destinations,
        )
        self.register_action(
            AgentCapability(
                action="check_sanctions",
                description="Check if a country has international sanctions that may affect travel",
                parameters={
                    "country": CapabilityParameter(
                        type="string", description="The name of the country to check"
                    )
                },
                examples=[{"country": "Iran", "result": {"has_sanctions": True}}],
            ),
            self._check_sanctions,
        )
        self.register_action(
            AgentCapability(
                action="suggest_safe_alternatives",
                description="Suggest safer alternative destinations in the same region",
                parameters={
                    "destination": CapabilityParameter(
                        type="string",
                        description="The original destination that has safety concerns",
                    ),
                    "region": CapabilityParameter(
                        type="string",
                        description="The broader region to find alternatives in",
                        required=False,
                    ),
                },
            ),
            self._suggest_safe_alternatives,
        )

        self.register_query("is_destination_safe", self._is_destination_safe)
        self.register_query("get_safety_details", self._get_safety_details)

    async def _check_destination_safety(self, task: Task) -> TaskResult:
        if missing := self.require(task.context, "destination"):
            return missing
        check = safety.check_destination_safety(task.context["destination"])
        return TaskResult.ok(check.model_dump(mode="json", exclude_none=True))

    async def _get_high_risk_destinations(self, task: Task) -> TaskResult:
        return TaskResult.ok({"destinations": safety.get_high_risk_destinations()})

    async def _check_sanctions(self, task: Task) -> TaskResult:
        if missing := self.require(task.context, "country"):
            return missing
        country = task.context["country"]
        return TaskResult.ok(
            {"country": country, "has_sanctions": safety.has_sanctions(country)}
        )

    async def _suggest_safe_alternatives(self, task: Task) -> TaskResult:
        if missing := self.require(task.context, "destination"):
            return missing
        region = task.context.get("region")
        return TaskResult.ok(
            {
                "destination": task.context["destination"],
                "region": region,
                "alternatives": safety.suggest_safe_alternatives(region),
            }
        )

    async def _is_destination_safe(self, query: dict[str, Any]) -> dict[str, Any]:
        self.require_query(query, "destination")
        check = safety.check_destination_safety(query["destination"])
        return {
            "is_safe": check.safe,
            "safety_info": check.model_dump(mode="json", exclude_none=True),
        }

    async def _get_safety_details(self, query: dict[str, Any]) -> dict[str, Any]:
        self.require_query(query, "destination")
        advisory = safety.get_safety_info(query["destination"])
        return {
            "details": advisory.model_dump(mode="json", exclude_none=True)
            if advisory
            else None
        }
