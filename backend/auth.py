import logging

from fastapi import Request, HTTPException, Depends, status
from jose import jwt, JWTError
from supabase_rest import sb_select

from config import JWT_SECRET, JWT_ALGORITHM, JWT_AUDIENCE

logger = logging.getLogger(__name__)


def verify_token(token: str) -> dict | None:
    """Decode and verify a Supabase access token. Returns the payload or None on failure."""
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
        )
        return payload
    except JWTError as e:
        logger.info(f"Rejected access token: {e}")
        return None


def bearer_token(request: Request) -> str:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth_header.split(" ", 1)[1]


async def get_current_user(request: Request) -> str:
    """
    FastAPI dependency — extracts the Bearer token from the Authorization
    header, verifies it, and returns the Supabase user id (the `sub` claim).
    Raises HTTP 401 if the token is missing or invalid.
    """
    payload = verify_token(bearer_token(request))
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token payload missing required claims",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user_id


def get_user_role(user_id: str) -> str:
    rows = sb_select("user_roles", filters={"user_id": user_id}, columns="role")
    if not rows:
        return "student"
    return rows[0].get("role") or "student"


async def require_admin(user_id: str = Depends(get_current_user)) -> str:
    """FastAPI dependency — only lets users with the admin role through."""
    try:
        role = get_user_role(user_id)
    except Exception as e:
        logger.error(f"Role lookup failed for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to verify admin privileges")
    if role != "admin":
        raise HTTPException(status_code=403, detail="Admin privileges required")
    return user_id
