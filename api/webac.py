"""
WebAC role inspection endpoint.

Returns the resolved role map for a store path. Callers need acl:Control
on that path, the same mode that governs reading its ACL.
"""

import logging
from typing import Dict, List

from fastapi import APIRouter, HTTPException, Query, Request, status
from pydantic import BaseModel, ConfigDict

from api.guards import require_mode
from core.webac import MODE_CONTROL, StoreAccessError, get_provider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webac", tags=["webac"])


# ============================================================================
# Response Models
# ============================================================================

class RoleMapResponse(BaseModel):
    """Resolved roles on one resource."""
    path: str
    roles: Dict[str, List[str]]

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "path": "/webacl_box1",
            "roles": {
                "smith123": [
                    "http://www.w3.org/ns/auth/acl#Read",
                    "http://www.w3.org/ns/auth/acl#Write",
                ]
            }
        }
    })


def _query_path(request: Request) -> str:
    return request.query_params.get("path") or "/"


# ============================================================================
# Endpoints
# ============================================================================

@router.get("/roles", response_model=RoleMapResponse)
@require_mode(MODE_CONTROL, resource_path=_query_path)
def get_roles(request: Request, path: str = Query("/", description="Store path to inspect")):
    """
    Get the role map for a store path.

    Returns:
        RoleMapResponse with modes sorted per principal

    Raises:
        HTTPException: 404 if nothing exists at ``path``
    """
    store = request.app.state.webac_store

    try:
        with store.session() as session:
            resource = session.find(path)
            if resource is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail={"error": "not_found", "path": path}
                )
            roles = get_provider().get_roles(resource, session)
    except StoreAccessError as e:
        logger.error(f"Store unavailable while resolving roles for {path}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error": "store_unavailable", "message": "Access control store unavailable"}
        )

    return RoleMapResponse(
        path=path,
        roles={principal: sorted(modes) for principal, modes in sorted(roles.items())},
    )
