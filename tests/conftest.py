"""Shared fixtures for the admin panel test suite."""

import copy
import json

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.admin.models import ConfigurationSnapshot
from src.config.settings import get_settings
from src.gateway.client import RequestGateway

ADMIN_URL = "http://admin.test"
ADMIN_KEY = "sk-admin-secret"


@pytest.fixture
def settings_data() -> dict:
    """Settings body as returned by GET /admin/settings."""
    return {
        "api_keys": ["k1"],
        "admin_api_keys": [ADMIN_KEY],
        "claude_ai_url": "https://claude.ai",
        "claude_api_baseurl": "https://api.anthropic.com",
        "proxy_url": None,
        "custom_prompt": None,
        "human_name": "Human",
        "assistant_name": "Assistant",
        "padtxt_length": 0,
        "use_real_roles": True,
        "allow_external_images": False,
        "preserve_chats": False,
    }


@pytest.fixture
def snapshot(settings_data) -> ConfigurationSnapshot:
    return ConfigurationSnapshot.from_dict(settings_data)


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: set env vars and clear settings cache.

    Usage:
        override_settings(ADMIN_BASE_URL="http://x", SAVED_STATUS_DELAY="0.01")
    """
    def _override(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key.upper(), str(value))
        get_settings.cache_clear()

    yield _override

    get_settings.cache_clear()


class FakeAdminService:
    """In-process stand-in for the proxy's /admin API."""

    def __init__(self, settings: dict):
        self.settings = copy.deepcopy(settings)
        self.accounts: dict[str, dict] = {}
        self.calls: list[tuple[str, str, dict | None]] = []
        self.seen_keys: list[str | None] = []
        self.fail_next: tuple[int, dict] | None = None
        self.healthy = True
        self.app = self._build_app()

    def _build_app(self) -> FastAPI:
        app = FastAPI()

        @app.middleware("http")
        async def record(request: Request, call_next):
            body = await request.body()
            self.calls.append((request.method, request.url.path, json.loads(body) if body else None))
            self.seen_keys.append(request.headers.get("X-API-Key"))
            if request.url.path.startswith("/admin") and request.headers.get("X-API-Key") != ADMIN_KEY:
                return JSONResponse(status_code=401, content={"detail": "Invalid admin key"})
            if self.fail_next is not None:
                status, payload = self.fail_next
                self.fail_next = None
                return JSONResponse(status_code=status, content=payload)
            return await call_next(request)

        @app.get("/health")
        async def health():
            if not self.healthy:
                return JSONResponse(status_code=503, content={"status": "down"})
            return {"status": "healthy"}

        @app.get("/admin/settings")
        async def get_settings_route():
            return self.settings

        @app.put("/admin/settings")
        async def put_settings(request: Request):
            delta = await request.json()
            self.settings.update(delta)
            return delta

        @app.get("/admin/statistics")
        async def statistics():
            return {
                "status": "healthy",
                "accounts": {"total_accounts": len(self.accounts), "active_sessions": 1},
            }

        @app.get("/admin/accounts")
        async def list_accounts():
            return list(self.accounts.values())

        @app.get("/admin/accounts/{org}")
        async def get_account(org: str):
            if org not in self.accounts:
                return JSONResponse(status_code=404, content={"detail": {"message": "Account not found"}})
            return self.accounts[org]

        @app.post("/admin/accounts")
        async def create_account(request: Request):
            body = await request.json()
            org = body.get("organization_uuid", f"org-{len(self.accounts) + 1}")
            self.accounts[org] = {
                "organization_uuid": org,
                "capabilities": body.get("capabilities", []),
                "cookie_value": body.get("cookie_value"),
                "status": "valid",
                "auth_type": "cookie_only",
            }
            return self.accounts[org]

        @app.put("/admin/accounts/{org}")
        async def update_account(org: str, request: Request):
            self.accounts[org].update(await request.json())
            return self.accounts[org]

        @app.delete("/admin/accounts/{org}")
        async def delete_account(org: str):
            self.accounts.pop(org, None)
            return {"ok": True}

        return app

    def settings_puts(self) -> list[dict]:
        return [body for method, path, body in self.calls if method == "PUT" and path == "/admin/settings"]


@pytest.fixture
def fake_admin(settings_data) -> FakeAdminService:
    return FakeAdminService(settings_data)


@pytest.fixture
def notices() -> list[str]:
    """Collects gateway failure notifications."""
    return []


@pytest.fixture
def make_gateway(fake_admin, notices):
    """Build a gateway wired to the fake admin service.

    Usage:
        gateway = make_gateway(credential=ADMIN_KEY)
    """
    def _make(credential: str | None = ADMIN_KEY) -> RequestGateway:
        gateway = RequestGateway(credential=lambda: credential, notify=notices.append, base_url=ADMIN_URL)
        gateway._client = httpx.AsyncClient(transport=httpx.ASGITransport(app=fake_admin.app))
        return gateway

    return _make
