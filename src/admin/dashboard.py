"""Dashboard summary: service liveness plus account counters."""

import asyncio
from dataclasses import dataclass

from src.admin.api import HealthApi, StatisticsApi
from src.gateway.errors import GatewayError


@dataclass
class DashboardSummary:
    server_status: str  # "online" | "offline"
    service_status: str | None = None  # "healthy" | "degraded"
    total_accounts: int | None = None
    active_sessions: int | None = None


async def load_dashboard(statistics: StatisticsApi, health: HealthApi) -> DashboardSummary:
    """Fetch statistics and health together; any failure reads as offline."""
    try:
        stats, healthy = await asyncio.gather(statistics.get(), health.check())
    except GatewayError:
        return DashboardSummary(server_status="offline")

    if not healthy:
        return DashboardSummary(server_status="offline")

    return DashboardSummary(
        server_status="online",
        service_status=stats.status,
        total_accounts=stats.total_accounts,
        active_sessions=stats.active_sessions,
    )
