from starlette.requests import Request

UNKNOWN_CLIENT = "unknown"


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.

    Uses the first address of X-Forwarded-For (the service is expected to sit
    behind a proxy). Falls back to "unknown" when the header is absent.

    Args:
        request: incoming HTTP request

    Returns:
        IP address as string
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first one
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    return UNKNOWN_CLIENT
