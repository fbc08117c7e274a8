"""Clove admin panel service: FastAPI application entry point.

Serves the panel's editing flows over HTTP: admin login, the settings
editor with immediate per-field saves, account management and the
dashboard summary. Every call to the proxy service goes through the
shared request gateway.
"""

from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from src.accounts.forms import AccountForm, build_account_payload
from src.accounts.tiers import AccountTier, tier_of
from src.admin.api import AccountsApi, HealthApi, StatisticsApi
from src.admin.dashboard import load_dashboard
from src.gateway.errors import GatewayError, NetworkError
from src.gateway.factory import close_gateway, get_controller, get_gateway
from src.logging.audit import get_audit_logger, setup_logging
from src.session import auth
from src.session.state import get_session
from src.sync.controller import KEY_LIST_FIELDS, generate_key
from src.sync.diff import SETTINGS_FIELDS

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging()
    get_audit_logger().info("Panel started")
    yield
    await close_gateway()
    get_audit_logger().info("Panel stopped")


app = FastAPI(
    title="Clove Admin Panel",
    description="Settings and account administration for the Clove proxy",
    version=VERSION,
    lifespan=lifespan,
)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    status_code = 502 if isinstance(exc, NetworkError) or exc.status_code is None else exc.status_code
    return JSONResponse(status_code=status_code, content={"error": exc.message})


@app.get("/health")
async def health():
    return {"status": "healthy", "version": VERSION}


# --- Session ---

@app.post("/panel/login")
async def login(request: Request):
    body = await request.json()
    credential = body.get("credential", "")
    if not credential:
        raise HTTPException(status_code=400, detail="Missing admin key")
    await auth.login(get_session(), StatisticsApi(get_gateway()), credential)
    return {"authenticated": True}


@app.post("/panel/logout")
async def logout():
    auth.logout(get_session())
    return {"authenticated": False}


# --- Settings editor ---

def _settings_view() -> dict:
    controller = get_controller()
    store = controller.store
    return {
        "status": controller.status.value,
        "settings": store.draft.to_dict(),
        "unsaved_fields": sorted(store.pending_delta()),
    }


@app.get("/panel/settings")
async def get_settings_view(reload: bool = False):
    store = get_controller().store
    if reload or not store.loaded:
        await store.load()
    return _settings_view()


@app.patch("/panel/settings")
async def edit_settings(request: Request):
    """Apply field edits to the draft and commit them immediately."""
    changes = await request.json()
    unknown = set(changes) - set(SETTINGS_FIELDS)
    if unknown:
        raise HTTPException(status_code=422, detail=f"Unknown settings fields: {sorted(unknown)}")

    controller = get_controller()
    if not controller.store.loaded:
        await controller.store.load()
    saved = await controller.update_field(**changes)
    return {"saved": saved, **_settings_view()}


def _key_field(field: str) -> str:
    if field not in KEY_LIST_FIELDS:
        raise HTTPException(status_code=404, detail=f"Unknown key list: {field}")
    return field


@app.post("/panel/settings/{field}")
async def add_key(field: str, request: Request):
    field = _key_field(field)
    body = await request.json()
    controller = get_controller()
    if not controller.store.loaded:
        await controller.store.load()
    key = body.get("key", "")
    if field == "api_keys":
        saved = await controller.add_api_key(key)
    else:
        saved = await controller.add_admin_key(key)
    return {"saved": saved, **_settings_view()}


@app.delete("/panel/settings/{field}/{key}")
async def remove_key(field: str, key: str):
    field = _key_field(field)
    controller = get_controller()
    if not controller.store.loaded:
        await controller.store.load()
    if field == "api_keys":
        saved = await controller.remove_api_key(key)
    else:
        saved = await controller.remove_admin_key(key)
    return {"saved": saved, **_settings_view()}


@app.post("/panel/keys")
async def new_key():
    return {"key": generate_key()}


@app.get("/panel/status")
async def sync_status():
    return {"status": get_controller().status.value}


# --- Accounts ---

def _account_view(account) -> dict:
    return {**asdict(account), "tier": tier_of(account.capabilities).value}


def _account_form(body: dict) -> AccountForm:
    try:
        tier = AccountTier(body.get("tier", ""))
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown account tier: {body.get('tier')}")
    return AccountForm(
        cookie_value=body.get("cookie_value", ""),
        oauth_access_token=body.get("oauth_access_token", ""),
        oauth_refresh_token=body.get("oauth_refresh_token", ""),
        oauth_expires_at=str(body.get("oauth_expires_at", "") or ""),
        organization_uuid=body.get("organization_uuid", ""),
        tier=tier,
    )


@app.get("/panel/accounts")
async def list_accounts():
    accounts = await AccountsApi(get_gateway()).list()
    return [_account_view(a) for a in accounts]


@app.post("/panel/accounts")
async def create_account(request: Request):
    form = _account_form(await request.json())
    account = await AccountsApi(get_gateway()).create(build_account_payload(form))
    return _account_view(account)


@app.put("/panel/accounts/{organization_uuid}")
async def update_account(organization_uuid: str, request: Request):
    form = _account_form(await request.json())
    api = AccountsApi(get_gateway())
    existing = await api.get(organization_uuid)
    account = await api.update(organization_uuid, build_account_payload(form, existing))
    return _account_view(account)


@app.delete("/panel/accounts/{organization_uuid}")
async def delete_account(organization_uuid: str):
    await AccountsApi(get_gateway()).delete(organization_uuid)
    return {"deleted": organization_uuid}


# --- Dashboard ---

@app.get("/panel/dashboard")
async def dashboard():
    gateway = get_gateway()
    summary = await load_dashboard(StatisticsApi(gateway), HealthApi(gateway))
    return asdict(summary)
