#!/usr/bin/env python
"""Travel Plan Example - 여행 계획 워크플로우 예제.

이 예제는 세 가지 여행 Agent(안전, 항공, 숙소)를 Orchestrator에 등록하고
안전 점검 -> 항공편 검색 -> 숙소 검색 순서로 여행 계획을 실행합니다.
각 단계는 고정된 대기 시간 없이 Task 완료 신호를 기다립니다.

사용법:
    python examples/travel_plan.py [--destination Tokyo] [--budget 3000]
"""

import argparse
import asyncio
from pathlib import Path

from a2a_travel.core import TravelPlanWorkflow, build_default_orchestrator
from a2a_travel.models import AgentType
from a2a_travel.utils import WorkflowInputError, get_config, init_config, setup_logging

project_root = Path(__file__).parent.parent


def parse_args() -> argparse.Namespace:
    """명령행 인자를 파싱합니다."""
    parser = argparse.ArgumentParser(description="Plan a trip with the travel agents")
    parser.add_argument("--destination", default="Tokyo", help="Destination")
    parser.add_argument("--departure-date", default="2025-06-15", help="YYYY-MM-DD")
    parser.add_argument("--return-date", default="2025-06-20", help="YYYY-MM-DD")
    parser.add_argument("--budget", type=float, default=3000, help="Total budget (USD)")
    parser.add_argument("--departure-city", default=None, help="City of departure")
    return parser.parse_args()


async def run_travel_plan(args: argparse.Namespace) -> None:
    """여행 계획 워크플로우를 실행하고 결과를 출력합니다."""
    config = get_config()
    setup_logging(
        level=config.logging.level,
        json_format=config.logging.format.value == "json",
        log_file=config.logging.file,
    )

    orchestrator = build_default_orchestrator(config)
    for info in orchestrator.get_agents():
        print(f"Agent 등록됨: {info.name} ({info.type.value}) - {', '.join(info.get_actions())}")

    print()
    print("=" * 60)
    print(f"여행 계획: {args.destination} ({args.departure_date} ~ {args.return_date})")
    print("=" * 60)

    workflow = TravelPlanWorkflow(orchestrator, config.workflow)
    try:
        plan = await workflow.plan_trip(
            args.destination,
            args.departure_date,
            args.return_date,
            args.budget,
            departure_city=args.departure_city,
        )
    except WorkflowInputError as e:
        print(f"입력 오류 ({e.field}): {e.message}")
        return

    await orchestrator.drain()

    print()
    print("[안전 점검]")
    if plan.safety is None:
        print("  결과 없음")
    elif plan.safety.get("safe"):
        print("  여행 가능")
    else:
        advisory = plan.safety.get("advisory", {})
        print(f"  여행 경보: {advisory.get('level')} - {advisory.get('details')}")

    if plan.flights is not None:
        flights = plan.flights.get("flights", [])
        print()
        print(f"[항공편] {len(flights)}건 (출처: {plan.flights.get('source')})")
        for flight in flights[:3]:
            print(f"  {flight['airline']} {flight['flight_number']}: ${flight['price']}")

    if plan.hotels is not None:
        hotels = plan.hotels.get("hotels", [])
        print()
        print(f"[숙소] {len(hotels)}건")
        for hotel in hotels:
            print(f"  {hotel['name']} ({hotel['rating']}): ${hotel['price_per_night']}/박")

    print()
    print("[Task 목록]")
    for task in orchestrator.get_all_tasks():
        marker = "  -> " if task.parent_task_id else "  "
        print(f"{marker}{task.title} [{task.status.value}]")
        if task.agent_type == AgentType.TRAVEL_SAFETY and task.result and task.result.data:
            alternatives = task.result.data.get("alternatives")
            if alternatives:
                print(f"       대안 여행지: {', '.join(alternatives)}")


def main() -> None:
    """메인 함수."""
    args = parse_args()
    init_config(yaml_path=project_root / "configs" / "app.yaml")
    asyncio.run(run_travel_plan(args))


if __name__ == "__main__":
    main()
