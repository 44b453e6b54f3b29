import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from auth import get_current_user
from services.certification_service import CertificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/certifications", tags=["Certification"])


class ExamSubmission(BaseModel):
    submission_url: Optional[str] = None
    results: Optional[Any] = None


@router.get("")
async def list_workflows(user_id: str = Depends(get_current_user)):
    try:
        return CertificationService.list_workflows(user_id)
    except Exception as e:
        logger.error(f"Listing certification workflows failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to load certifications. Please try again.")


@router.get("/{level}")
async def level_status(level: int, user_id: str = Depends(get_current_user)):
    try:
        status = CertificationService.level_status(user_id, level)
        if status is None:
            raise HTTPException(status_code=404, detail="No course at this level")
        return status
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Certification status for level {level} failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to load certification status. Please try again.")


@router.post("/{level}/start")
async def start_certification(level: int, user_id: str = Depends(get_current_user)):
    try:
        workflow = CertificationService.start(user_id, level)
        if workflow is None:
            raise HTTPException(status_code=404, detail="No course at this level")
        return {"status": "success", "data": workflow}
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Starting certification at level {level} failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to start certification. Please try again.")


@router.get("/{level}/exam")
async def exam_settings(level: int, user_id: str = Depends(get_current_user)):
    try:
        settings = CertificationService.exam_settings(level)
        if settings is None:
            raise HTTPException(status_code=404, detail="No course at this level")
        return settings
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Loading exam for level {level} failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to load exam. Please try again.")


@router.post("/{level}/exam")
async def submit_exam(level: int, body: ExamSubmission, user_id: str = Depends(get_current_user)):
    try:
        workflow = CertificationService.submit_exam(user_id, level, body.submission_url, body.results)
        if workflow is None:
            raise HTTPException(status_code=404, detail="Certification not started")
        return {"status": "success", "data": workflow}
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Exam submission at level {level} failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to submit exam. Please try again.")


@router.post("/{level}/contract")
async def sign_contract(level: int, user_id: str = Depends(get_current_user)):
    try:
        workflow = CertificationService.sign_contract(user_id, level)
        if workflow is None:
            raise HTTPException(status_code=404, detail="Certification not started")
        return {"status": "success", "data": workflow}
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Contract signing at level {level} failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to sign contract. Please try again.")
