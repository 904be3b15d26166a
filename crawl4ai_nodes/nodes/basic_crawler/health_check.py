"""Health Check operation: report the Crawl4AI server's status."""

from datetime import datetime, timezone
from typing import Any, Dict, List

from ...execution import ExecutionContext, Item, execute_per_item
from ...properties import NodeProperty, show_when
from ..shared import get_crawl4ai_client

OPERATION = "healthCheck"

DESCRIPTION: List[NodeProperty] = [
    NodeProperty(
        display_name="Health Check has no additional parameters. The server URL and auth are taken from credentials.",
        name="healthCheckNotice",
        type="notice",
        default="",
        display_options=show_when(operation=[OPERATION]),
    ),
]


async def _check_item(ctx: ExecutionContext, i: int) -> Dict[str, Any]:
    client = get_crawl4ai_client(ctx)
    checked_at = datetime.now(timezone.utc).isoformat()

    health = await client.health_check_detailed()

    output: Dict[str, Any] = {
        "serverUrl": client.base_url,
        "checkedAt": checked_at,
        "healthy": health["healthy"],
    }
    if health["healthy"]:
        output.update({
            "status": health.get("status"),
            "memoryPercent": health.get("memory_percent"),
            "cpuPercent": health.get("cpu_percent"),
            "uptimeSeconds": health.get("uptime_seconds"),
        })
    else:
        output["healthError"] = health.get("error")
    return output


async def execute(ctx: ExecutionContext, items: List[Item]) -> List[Item]:
    return await execute_per_item(ctx, items, _check_item)
