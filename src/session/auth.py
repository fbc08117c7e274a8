"""Admin login: store the key, then prove it against the statistics endpoint."""

from src.admin.api import StatisticsApi
from src.gateway.errors import AuthError, GatewayError
from src.logging.audit import get_audit_logger
from src.session.state import SessionState

LOGIN_FAILED_MESSAGE = "Invalid admin key or server unreachable"


async def login(session: SessionState, statistics: StatisticsApi, credential: str) -> None:
    """Log in with an admin key.

    The key is stored first so the check request carries it. Any check
    failure (rejected key or no response) clears the session again.
    """
    logger = get_audit_logger()
    session.login(credential)
    try:
        await statistics.get()
    except GatewayError as e:
        session.logout()
        logger.warning(
            "Login rejected",
            extra={"audit_data": {"status_code": e.status_code, "reason": e.message}},
        )
        raise AuthError(LOGIN_FAILED_MESSAGE, status_code=e.status_code, payload=e.payload) from e

    logger.info("Login succeeded")


def logout(session: SessionState) -> None:
    session.logout()
    get_audit_logger().info("Logged out")
