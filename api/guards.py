"""
API endpoint guards for WebAC mode-based authorization.

Provides a decorator to protect FastAPI routes by the access modes the
caller holds on a store resource.
"""

import inspect
import logging
from functools import wraps
from typing import Any, Callable, Dict, Optional, Set

from fastapi import HTTPException, Request, status

from api.context import get_principals
from config import get_settings
from core.metrics import audit_webac_denial, record_webac_check
from core.webac import (
    StoreAccessError,
    WebACAuthorizationDelegate,
    get_provider,
    has_mode,
)

logger = logging.getLogger(__name__)

ResourcePathResolver = Callable[[Request], str]


# ============================================================================
# Guard Decorator
# ============================================================================

def require_mode(mode: str, resource_path: Optional[ResourcePathResolver] = None) -> Callable:
    """
    Decorator to require an access mode on a store resource.

    The resource defaults to the request path; pass ``resource_path`` to
    derive it some other way (e.g. from a query parameter). Paths that do
    not exist are checked against their nearest existing ancestor. The
    resolved role map is left on ``request.state.webac_roles``.

    Args:
        mode: Mode URI (e.g. MODE_WRITE)
        resource_path: Maps the request to a store path

    Returns:
        Decorator function

    Raises:
        HTTPException: 403 if no principal holds the mode, 503 if the
            store is unavailable, 500 if the app is misconfigured

    Examples:
        >>> @app.put("/collections/{name}")
        >>> @require_mode(MODE_WRITE)
        >>> def update_collection(request: Request, name: str):
        >>>     return {"status": "updated"}
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def async_wrapper(*args, **kwargs) -> Any:
            request = _extract_request_from_args(args, kwargs)
            _enforce(request, mode, resource_path)

            result = func(*args, **kwargs)
            if inspect.isawaitable(result):
                return await result
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs) -> Any:
            request = _extract_request_from_args(args, kwargs)
            _enforce(request, mode, resource_path)
            return func(*args, **kwargs)

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def _enforce(request: Optional[Request], mode: str, resource_path: Optional[ResourcePathResolver]):
    if request is None:
        logger.error(f"@require_mode({mode}) decorator requires Request parameter")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error: Request not found"
        )

    try:
        principals = get_principals(request)
    except AttributeError:
        logger.error("Request principals not available. Is an authentication layer configured?")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error: Principals not available"
        )

    store = getattr(request.app.state, "webac_store", None)
    if store is None:
        logger.error("No WebAC store configured on app.state.webac_store")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error: Store not configured"
        )

    target = resource_path(request) if resource_path else request.url.path
    route = str(request.url.path)

    try:
        roles = _resolve_for_path(store, target)
    except StoreAccessError as e:
        logger.error(f"Store unavailable while checking {mode} on {target}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error": "store_unavailable", "message": "Access control store unavailable"}
        )

    allowed = has_mode(roles, principals, mode)
    record_webac_check(allowed=allowed, mode=mode, route=route)

    if not allowed:
        if get_settings().WEBAC_AUDIT_DENIALS:
            audit_webac_denial(
                mode=mode,
                principals=principals,
                resource_path=target,
                route=route,
                method=request.method,
            )

        logger.warning(f"Access denied: principals={sorted(principals)}, mode={mode}, resource={target}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "forbidden",
                "mode": mode,
                "message": f"Mode '{mode}' required on {target}",
            }
        )

    logger.debug(f"Access granted: principals={sorted(principals)}, mode={mode}, resource={target}")
    request.state.webac_roles = roles


def _resolve_for_path(store, path: str) -> Dict[str, Set[str]]:
    with store.session() as session:
        resource = WebACAuthorizationDelegate.nearest_existing(session, path)
        if resource is None:
            return {}
        return get_provider().get_roles(resource, session)


def _extract_request_from_args(args: tuple, kwargs: dict) -> Optional[Request]:
    """
    Extract Request object from function arguments.

    Args:
        args: Positional arguments
        kwargs: Keyword arguments

    Returns:
        Request object if found, None otherwise
    """
    if 'request' in kwargs:
        return kwargs['request']

    for arg in args:
        if isinstance(arg, Request):
            return arg

    return None
