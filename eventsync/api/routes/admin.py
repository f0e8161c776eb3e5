"""Admin routes, protected by the admin API key."""

import logging

from fastapi import APIRouter, Depends, Header, HTTPException

from ...auth.identity import DatabaseIdentityProvider
from ...config.external_services import AdminConfig
from ...lifecycle.state import Role
from ..dependencies import get_identity
from ..schemas import RoleUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def verify_admin(authorization: str = Header(...)) -> None:
    """Check the Authorization header against ADMIN_API_KEY."""
    admin_config = AdminConfig()
    try:
        admin_config.validate()
    except ValueError as e:
        logger.error(f"Admin API unavailable: {e}")
        raise HTTPException(status_code=503, detail="Admin API not configured")

    if not admin_config.verify_auth(authorization):
        raise HTTPException(
            status_code=401,
            detail="Invalid authorization"
        )


@router.put("/profiles/{user_id}/role", dependencies=[Depends(verify_admin)])
def set_profile_role(
    user_id: str,
    body: RoleUpdateRequest,
    identity: DatabaseIdentityProvider = Depends(get_identity)
):
    """Make a user an approver or a submitter."""
    try:
        role = Role.parse(body.role)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown role: {body.role}")

    profile = identity.set_role(user_id, role)
    return profile.to_dict()
