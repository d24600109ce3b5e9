"""HTTP Basic auth gate for the list and task routes."""

from fastapi import HTTPException, Request
from fastapi.security import HTTPBasic
import structlog

from todo_api.core.errors import AuthError

logger = structlog.get_logger(__name__)

# Static allow-list of (username, password) pairs.
ALLOWED_CREDENTIALS: frozenset[tuple[str, str]] = frozenset(
    {
        ("Mona", "42"),
        ("Liza", "315"),
    }
)

_basic = HTTPBasic(auto_error=False)


def is_allowed(username: str, password: str) -> bool:
    """Exact match of both fields against one allow-listed pair."""
    return (username, password) in ALLOWED_CREDENTIALS


async def require_credentials(request: Request) -> str:
    """
    Dependency that admits only allow-listed Basic credentials.

    Returns:
        The authenticated username

    Raises:
        AuthError: If credentials are missing, malformed or unknown
    """
    try:
        credentials = await _basic(request)
    except HTTPException as e:
        # HTTPBasic raises for undecodable credentials even with auto_error off.
        logger.info("Rejected malformed credentials", path=request.url.path)
        raise AuthError("Malformed basic credentials") from e

    if credentials is None:
        logger.info("Rejected request without credentials", path=request.url.path)
        raise AuthError("Missing basic credentials")

    if not is_allowed(credentials.username, credentials.password):
        logger.info(
            "Rejected unknown credentials",
            path=request.url.path,
            username=credentials.username,
        )
        raise AuthError("Invalid credentials")

    return credentials.username
