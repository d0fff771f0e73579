"""Application-wide constants for entity-actions.

Constants that define library behavior.
For per-adapter settings, see config.py.
"""

__all__ = [
    # Application identity
    "APP_NAME",
    # Action dispatch
    "DEFAULT_ACTION_METHOD",
    "HTTP_METHODS",
    "QUERY_STRING_METHODS",
    "URL_SEPARATOR",
    # HTTP transport
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "MIN_HTTP_TIMEOUT_SECONDS",
    "MAX_HTTP_TIMEOUT_SECONDS",
]

# ============================================================================
# Application Identity
# ============================================================================

# Used for logger names and the User-Agent header
APP_NAME: str = "entity-actions"

# ============================================================================
# Action Dispatch
# ============================================================================

# HTTP method used when an action definition does not name one
DEFAULT_ACTION_METHOD: str = "POST"

# Methods accepted in action definitions and adapter config
HTTP_METHODS: tuple[str, ...] = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")

# Methods whose payload is sent as query parameters instead of a JSON body
QUERY_STRING_METHODS: tuple[str, ...] = ("GET", "HEAD")

# Separator between the adapter's URL prefix and the action URL
URL_SEPARATOR: str = "/"

# ============================================================================
# HTTP Transport
# ============================================================================

# Default request timeout (seconds)
DEFAULT_HTTP_TIMEOUT_SECONDS: int = 30

# Timeout validation range (seconds)
MIN_HTTP_TIMEOUT_SECONDS: int = 1
MAX_HTTP_TIMEOUT_SECONDS: int = 300  # 5 minutes
