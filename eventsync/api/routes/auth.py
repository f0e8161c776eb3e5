"""Sign-up, sign-in and session routes."""

from fastapi import APIRouter, Depends

from ...auth.identity import AuthSession, DatabaseIdentityProvider
from ..dependencies import get_current_session, get_identity
from ..schemas import SignInRequest, SignUpRequest

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", status_code=201)
def sign_up(body: SignUpRequest, identity: DatabaseIdentityProvider = Depends(get_identity)):
    """Register a new submitter account."""
    identity.sign_up(body.email, body.password, body.name)
    return {"status": "success", "message": "Account created successfully"}


@router.post("/signin")
def sign_in(body: SignInRequest, identity: DatabaseIdentityProvider = Depends(get_identity)):
    """Exchange credentials for a bearer token."""
    session = identity.sign_in(body.email, body.password)
    profile = identity.get_profile(session.user_id)
    return {
        "token": session.token,
        "user_id": session.user_id,
        "profile": profile.to_dict() if profile else None,
    }


@router.post("/signout")
def sign_out(
    session: AuthSession = Depends(get_current_session),
    identity: DatabaseIdentityProvider = Depends(get_identity)
):
    identity.sign_out(session.token)
    return {"status": "success"}


@router.get("/session")
def current_session(
    session: AuthSession = Depends(get_current_session),
    identity: DatabaseIdentityProvider = Depends(get_identity)
):
    """The caller's session and profile (profile may be null)."""
    profile = identity.get_profile(session.user_id)
    return {
        "user_id": session.user_id,
        "email": session.email,
        "profile": profile.to_dict() if profile else None,
    }
