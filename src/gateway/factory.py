"""Process-wide gateway and settings controller singletons."""

from src.admin.api import SettingsApi
from src.gateway.client import RequestGateway
from src.session.state import get_session
from src.sync.controller import SyncController
from src.sync.store import ConfigurationStore

_gateway: RequestGateway | None = None
_controller: SyncController | None = None


def get_gateway() -> RequestGateway:
    global _gateway
    if _gateway is None:
        _gateway = RequestGateway(credential=get_session().accessor())
    return _gateway


def get_controller() -> SyncController:
    """Controller for the service settings, sharing the gateway singleton."""
    global _controller
    if _controller is None:
        settings_api = SettingsApi(get_gateway())
        _controller = SyncController(ConfigurationStore(settings_api), settings_api)
    return _controller


async def close_gateway() -> None:
    """Cancel pending status timers and close the HTTP client on shutdown."""
    global _gateway, _controller
    if _controller is not None:
        _controller.close()
        _controller = None
    if _gateway is not None:
        await _gateway.close()
        _gateway = None
