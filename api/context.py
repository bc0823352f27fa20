"""
Request principals for WebAC enforcement.

Identity is established upstream (authentication middleware, gateway);
it leaves the caller's agent id and group names in
``request.state.principals``. This module only reads them.
"""

from typing import FrozenSet

from fastapi import Request

from core.webac import FOAF_AGENT


def get_principals(request: Request) -> FrozenSet[str]:
    """
    Get the caller's principals from request state.

    Everyone is a foaf:Agent, so that class is always included.

    Args:
        request: FastAPI request object

    Returns:
        Agent and agent class identifiers

    Raises:
        AttributeError: If no upstream layer populated the principals
    """
    if not hasattr(request.state, "principals"):
        raise AttributeError(
            "Request state does not have 'principals' attribute. "
            "Ensure an authentication layer runs before WebAC guards."
        )

    return frozenset(request.state.principals or ()) | {FOAF_AGENT}
