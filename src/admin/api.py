"""Typed wrappers over the admin service endpoints."""

from src.admin.models import AccountResponse, ConfigurationSnapshot, StatisticsResponse
from src.gateway.client import RequestGateway
from src.gateway.errors import GatewayError


class SettingsApi:
    def __init__(self, gateway: RequestGateway):
        self._gateway = gateway

    async def get(self) -> ConfigurationSnapshot:
        response = await self._gateway.get("/admin/settings")
        return ConfigurationSnapshot.from_dict(response.json())

    async def update(self, delta: dict) -> dict:
        """PUT a partial update; the service echoes the fields it applied (empty body: {})."""
        response = await self._gateway.put("/admin/settings", json=delta)
        return response.json() if response.content else {}


class AccountsApi:
    def __init__(self, gateway: RequestGateway):
        self._gateway = gateway

    async def list(self) -> list[AccountResponse]:
        response = await self._gateway.get("/admin/accounts")
        return [AccountResponse.from_dict(item) for item in response.json()]

    async def get(self, organization_uuid: str) -> AccountResponse:
        response = await self._gateway.get(f"/admin/accounts/{organization_uuid}")
        return AccountResponse.from_dict(response.json())

    async def create(self, account: dict) -> AccountResponse:
        response = await self._gateway.post("/admin/accounts", json=account)
        return AccountResponse.from_dict(response.json())

    async def update(self, organization_uuid: str, account: dict) -> AccountResponse:
        response = await self._gateway.put(f"/admin/accounts/{organization_uuid}", json=account)
        return AccountResponse.from_dict(response.json())

    async def delete(self, organization_uuid: str) -> None:
        await self._gateway.delete(f"/admin/accounts/{organization_uuid}")


class StatisticsApi:
    def __init__(self, gateway: RequestGateway):
        self._gateway = gateway

    async def get(self) -> StatisticsResponse:
        response = await self._gateway.get("/admin/statistics")
        return StatisticsResponse.from_dict(response.json())


class HealthApi:
    def __init__(self, gateway: RequestGateway):
        self._gateway = gateway

    async def check(self) -> bool:
        """Liveness check: True only for a 200 answer."""
        try:
            response = await self._gateway.get("/health")
        except GatewayError:
            return False
        return response.status_code == 200
