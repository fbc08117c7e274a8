"""Request gateway: the single path every admin API call goes through.

Attaches the session credential header and turns failed responses into
one human-readable message, surfaced once through the notifier before
the typed error is raised to the caller.
"""

from collections.abc import Callable

import httpx

from src.config.settings import get_settings
from src.gateway.errors import GatewayError, NetworkError, error_for_status
from src.logging.audit import (
    RequestTimer,
    generate_request_id,
    get_audit_logger,
    request_id_var,
)

FALLBACK_MESSAGE = "Request failed"


def extract_error_message(payload) -> str:
    """Pick the user-facing message out of an error body.

    Precedence: detail.message, detail (when a string), message, fallback.
    """
    if not isinstance(payload, dict):
        return FALLBACK_MESSAGE

    detail = payload.get("detail")
    if isinstance(detail, dict):
        message = detail.get("message")
        if isinstance(message, str) and message:
            return message
    if isinstance(detail, str) and detail:
        return detail

    message = payload.get("message")
    if isinstance(message, str) and message:
        return message

    return FALLBACK_MESSAGE


def log_notifier(message: str) -> None:
    get_audit_logger().warning("Admin request failed", extra={"audit_data": {"notice": message}})


class RequestGateway:
    """Wraps outbound calls to the admin service."""

    def __init__(
        self,
        credential: Callable[[], str | None],
        notify: Callable[[str], None] = log_notifier,
        base_url: str | None = None,
    ):
        self._credential = credential
        self._notify = notify
        self._base_url = base_url
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            settings = get_settings()
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(settings.request_timeout, connect=settings.connect_timeout)
            )
        return self._client

    def _build_headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        credential = self._credential()
        if credential:
            headers[get_settings().credential_header] = credential
        return headers

    def _url(self, path: str) -> str:
        base = self._base_url or get_settings().admin_url
        return f"{base.rstrip('/')}/{path.lstrip('/')}"

    async def send(self, method: str, path: str, json=None, params: dict | None = None) -> httpx.Response:
        """Dispatch a request; return the response untouched on 2xx."""
        logger = get_audit_logger()
        request_id_var.set(generate_request_id())

        client = await self._get_client()
        try:
            with RequestTimer() as timer:
                response = await client.request(
                    method, self._url(path), json=json, params=params, headers=self._build_headers()
                )
        except httpx.TimeoutException as e:
            raise self._fail(NetworkError("Admin service timed out"), method, path) from e
        except httpx.HTTPError as e:
            raise self._fail(NetworkError("Cannot reach admin service"), method, path) from e

        if response.is_success:
            logger.info(
                "Admin request",
                extra={"audit_data": {
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "latency_ms": timer.elapsed_ms,
                }},
            )
            return response

        try:
            payload = response.json()
        except ValueError:
            payload = None
        error_cls = error_for_status(response.status_code)
        error = error_cls(extract_error_message(payload), status_code=response.status_code, payload=payload)
        raise self._fail(error, method, path)

    def _fail(self, error: GatewayError, method: str, path: str) -> GatewayError:
        get_audit_logger().info(
            "Admin request failed",
            extra={"audit_data": {
                "method": method,
                "path": path,
                "status_code": error.status_code,
                "error": type(error).__name__,
            }},
        )
        self._notify(error.message)
        return error

    async def get(self, path: str, params: dict | None = None) -> httpx.Response:
        return await self.send("GET", path, params=params)

    async def post(self, path: str, json=None) -> httpx.Response:
        return await self.send("POST", path, json=json)

    async def put(self, path: str, json=None) -> httpx.Response:
        return await self.send("PUT", path, json=json)

    async def delete(self, path: str) -> httpx.Response:
        return await self.send("DELETE", path)

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
