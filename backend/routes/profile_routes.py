import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from auth import get_current_user
from services.profile_service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/profile", tags=["Profile"])


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address: Optional[str] = None
    employment_status: Optional[str] = None


@router.get("")
async def get_profile(user_id: str = Depends(get_current_user)):
    try:
        profile = ProfileService.get_profile(user_id)
        if profile is None:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Loading profile for {user_id} failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to load profile. Please try again.")


@router.put("")
async def update_profile(body: ProfileUpdate, user_id: str = Depends(get_current_user)):
    try:
        result = ProfileService.update_profile(user_id, body.model_dump(exclude_unset=True))
        return {"status": "success", "data": result}
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Updating profile for {user_id} failed: {e}")
        raise HTTPException(
            status_code=500,
            detail="There was an error updating your profile. Please try again.",
        )
