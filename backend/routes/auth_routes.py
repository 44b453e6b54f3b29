# ---------- routes/auth_routes.py ----------
"""
Auth routes — thin wrappers over Supabase Auth.
Sign-in and sign-up happen on the hosted platform; this API only relays the
session and reports who the bearer of a token is.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from auth import get_current_user, get_user_role
from supabase_client import sign_in_user, sign_up_user
from supabase_rest import sb_select

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


# ── Pydantic schemas ──────────────────────────────────────────────
class LoginRequest(BaseModel):
    email: str
    password: str


class SignupRequest(BaseModel):
    email: str
    password: str
    first_name: str
    last_name: str
    address: Optional[str] = None
    employment_status: Optional[str] = None


# ── Routes ────────────────────────────────────────────────────────
@router.post("/login")
async def login(body: LoginRequest):
    try:
        resp = sign_in_user(body.email, body.password)
    except Exception as e:
        logger.info(f"Login failed for {body.email}: {e}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not resp.session:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return {
        "status": "success",
        "data": {
            "access_token": resp.session.access_token,
            "refresh_token": resp.session.refresh_token,
            "user_id": resp.user.id,
        },
    }


@router.post("/signup")
async def signup(body: SignupRequest):
    # Profile and role rows are created by the platform from the user metadata.
    metadata = body.model_dump(exclude={"email", "password"}, exclude_none=True)
    try:
        resp = sign_up_user(body.email, body.password, metadata)
    except Exception as e:
        logger.info(f"Signup failed for {body.email}: {e}")
        raise HTTPException(status_code=400, detail="Could not create account")

    return {
        "status": "success",
        "data": {
            "user_id": resp.user.id if resp.user else None,
            "access_token": resp.session.access_token if resp.session else None,
            "confirmation_required": resp.session is None,
        },
    }


@router.get("/me")
async def me(user_id: str = Depends(get_current_user)):
    try:
        profiles = sb_select("profiles", filters={"user_id": user_id})
        return {
            "user_id": user_id,
            "role": get_user_role(user_id),
            "profile": profiles[0] if profiles else None,
        }
    except Exception as e:
        logger.error(f"Loading session user {user_id} failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to load user")
