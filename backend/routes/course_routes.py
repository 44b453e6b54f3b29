import logging

from fastapi import APIRouter, Depends, HTTPException

from auth import get_current_user
from services.course_service import CourseService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Courses"])


@router.get("/dashboard")
async def dashboard(user_id: str = Depends(get_current_user)):
    """Learning path: every course with progress, status and certification CTA."""
    try:
        return CourseService.dashboard(user_id)
    except Exception as e:
        logger.error(f"Dashboard failed for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to load courses. Please try again.")


@router.get("/courses/{course_id}")
async def get_course(course_id: str, user_id: str = Depends(get_current_user)):
    try:
        page = CourseService.course_page(user_id, course_id)
        if page is None:
            raise HTTPException(status_code=404, detail="Course not found")
        return page
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Course page {course_id} failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to load course. Please try again.")


@router.get("/courses/{course_id}/subsections/{subsection_id}")
async def get_subsection(course_id: str, subsection_id: str, user_id: str = Depends(get_current_user)):
    try:
        page = CourseService.subsection_page(user_id, course_id, subsection_id)
        if page is None:
            raise HTTPException(status_code=404, detail="Subsection not found")
        return page
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Subsection page {subsection_id} failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to load subsection. Please try again.")


@router.post("/courses/{course_id}/subsections/{subsection_id}/complete")
async def complete_subsection(course_id: str, subsection_id: str, user_id: str = Depends(get_current_user)):
    try:
        record = CourseService.complete_subsection(user_id, course_id, subsection_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Subsection not found")
        return {"status": "success", "data": record}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Completing subsection {subsection_id} failed: {e}")
        raise HTTPException(
            status_code=500,
            detail="Failed to mark subsection as complete. Please try again.",
        )
