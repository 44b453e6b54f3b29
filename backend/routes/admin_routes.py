import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from auth import require_admin
from models.course import SubsectionType
from models.profile import AppRole
from services.content_service import ContentService
from services.certification_service import APPROVAL_ACTIONS, CertificationService
from services.user_admin_service import UserAdminService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admin", tags=["Admin"])


# ── Pydantic schemas ──────────────────────────────────────────────
class CourseCreate(BaseModel):
    title: str
    description: Optional[str] = ""
    level: int = Field(1, ge=1)
    is_available: bool = False
    is_coming_soon: bool = True


class CourseUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    level: Optional[int] = Field(None, ge=1)
    is_available: Optional[bool] = None
    is_coming_soon: Optional[bool] = None


class SectionCreate(BaseModel):
    title: str
    description: Optional[str] = ""


class SectionUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    order_index: Optional[int] = Field(None, ge=0)


class SubsectionCreate(BaseModel):
    title: str
    subsection_type: SubsectionType = SubsectionType.CONTENT
    content: Optional[str] = ""
    video_url: Optional[str] = ""
    duration_minutes: Optional[int] = Field(0, ge=0)


class SubsectionUpdate(BaseModel):
    title: Optional[str] = None
    subsection_type: Optional[SubsectionType] = None
    content: Optional[str] = None
    video_url: Optional[str] = None
    order_index: Optional[int] = Field(None, ge=0)
    duration_minutes: Optional[int] = Field(None, ge=0)


class ExamSettingsUpdate(BaseModel):
    exam_instructions: Optional[str] = None
    exam_url: Optional[str] = None
    exam_duration_minutes: Optional[int] = Field(None, ge=0)


class CertificationAction(BaseModel):
    user_id: str
    level: int
    action: str


class RoleChange(BaseModel):
    role: AppRole


def _fail(what: str, e: Exception):
    logger.error(f"Admin: {what} failed: {e}")
    raise HTTPException(status_code=500, detail=f"Failed to {what}")


# ── Courses ───────────────────────────────────────────────────────
@router.get("/courses")
async def list_courses(admin: str = Depends(require_admin)):
    try:
        return ContentService.list_courses()
    except Exception as e:
        _fail("fetch courses", e)


@router.post("/courses")
async def create_course(body: CourseCreate, admin: str = Depends(require_admin)):
    try:
        course = ContentService.create_course(body.model_dump())
        return {"status": "success", "message": "Course created successfully", "data": course}
    except Exception as e:
        _fail("save course", e)


@router.put("/courses/{course_id}")
async def update_course(course_id: str, body: CourseUpdate, admin: str = Depends(require_admin)):
    try:
        course = ContentService.update_course(course_id, body.model_dump(exclude_unset=True))
        if course is None:
            raise HTTPException(status_code=404, detail="Course not found")
        return {"status": "success", "message": "Course updated successfully", "data": course}
    except HTTPException:
        raise
    except Exception as e:
        _fail("save course", e)


@router.delete("/courses/{course_id}")
async def delete_course(course_id: str, admin: str = Depends(require_admin)):
    try:
        if not ContentService.delete_course(course_id):
            raise HTTPException(status_code=404, detail="Course not found")
        return {"status": "success", "message": "Course deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        _fail("delete course", e)


@router.post("/courses/{course_id}/availability")
async def toggle_availability(course_id: str, admin: str = Depends(require_admin)):
    try:
        course = ContentService.toggle_availability(course_id)
        if course is None:
            raise HTTPException(status_code=404, detail="Course not found")
        state = "published" if course.get("is_available") else "unpublished"
        return {"status": "success", "message": f"Course {state}", "data": course}
    except HTTPException:
        raise
    except Exception as e:
        _fail("update course availability", e)


# ── Sections ──────────────────────────────────────────────────────
@router.get("/courses/{course_id}/sections")
async def list_sections(course_id: str, admin: str = Depends(require_admin)):
    try:
        return ContentService.list_sections(course_id)
    except Exception as e:
        _fail("fetch sections", e)


@router.post("/courses/{course_id}/sections")
async def create_section(course_id: str, body: SectionCreate, admin: str = Depends(require_admin)):
    try:
        section = ContentService.create_section(course_id, body.model_dump())
        if section is None:
            raise HTTPException(status_code=404, detail="Course not found")
        return {"status": "success", "message": "Section created successfully", "data": section}
    except HTTPException:
        raise
    except Exception as e:
        _fail("save section", e)


@router.get("/sections/{section_id}")
async def section_info(section_id: str, admin: str = Depends(require_admin)):
    try:
        info = ContentService.section_info(section_id)
        if info is None:
            raise HTTPException(status_code=404, detail="Section not found")
        return info
    except HTTPException:
        raise
    except Exception as e:
        _fail("fetch section information", e)


@router.put("/sections/{section_id}")
async def update_section(section_id: str, body: SectionUpdate, admin: str = Depends(require_admin)):
    try:
        section = ContentService.update_section(section_id, body.model_dump(exclude_unset=True))
        if section is None:
            raise HTTPException(status_code=404, detail="Section not found")
        return {"status": "success", "message": "Section updated successfully", "data": section}
    except HTTPException:
        raise
    except Exception as e:
        _fail("save section", e)


@router.delete("/sections/{section_id}")
async def delete_section(section_id: str, admin: str = Depends(require_admin)):
    try:
        if not ContentService.delete_section(section_id):
            raise HTTPException(status_code=404, detail="Section not found")
        return {"status": "success", "message": "Section deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        _fail("delete section", e)


# ── Subsections ───────────────────────────────────────────────────
@router.get("/sections/{section_id}/subsections")
async def list_subsections(section_id: str, admin: str = Depends(require_admin)):
    try:
        return ContentService.list_subsections(section_id)
    except Exception as e:
        _fail("fetch subsections", e)


@router.post("/sections/{section_id}/subsections")
async def create_subsection(section_id: str, body: SubsectionCreate, admin: str = Depends(require_admin)):
    try:
        subsection = ContentService.create_subsection(section_id, body.model_dump(mode="json"))
        if subsection is None:
            raise HTTPException(status_code=404, detail="Section not found")
        return {"status": "success", "message": "Subsection created successfully", "data": subsection}
    except HTTPException:
        raise
    except Exception as e:
        _fail("save subsection", e)


@router.get("/subsections/{subsection_id}")
async def get_subsection(subsection_id: str, admin: str = Depends(require_admin)):
    try:
        subsection = ContentService.get_subsection(subsection_id)
        if subsection is None:
            raise HTTPException(status_code=404, detail="Subsection not found")
        return subsection
    except HTTPException:
        raise
    except Exception as e:
        _fail("fetch subsection data", e)


@router.put("/subsections/{subsection_id}")
async def update_subsection(subsection_id: str, body: SubsectionUpdate, admin: str = Depends(require_admin)):
    try:
        data = body.model_dump(mode="json", exclude_unset=True)
        subsection = ContentService.update_subsection(subsection_id, data)
        if subsection is None:
            raise HTTPException(status_code=404, detail="Subsection not found")
        return {"status": "success", "message": "Subsection updated successfully", "data": subsection}
    except HTTPException:
        raise
    except Exception as e:
        _fail("save subsection", e)


@router.delete("/subsections/{subsection_id}")
async def delete_subsection(subsection_id: str, admin: str = Depends(require_admin)):
    try:
        if not ContentService.delete_subsection(subsection_id):
            raise HTTPException(status_code=404, detail="Subsection not found")
        return {"status": "success", "message": "Subsection deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        _fail("delete subsection", e)


# ── Certification exams & review ──────────────────────────────────
@router.get("/exams")
async def list_exam_settings(admin: str = Depends(require_admin)):
    try:
        return CertificationService.list_exam_settings()
    except Exception as e:
        _fail("load courses", e)


@router.put("/exams/{course_id}")
async def update_exam_settings(course_id: str, body: ExamSettingsUpdate, admin: str = Depends(require_admin)):
    try:
        course = CertificationService.update_exam_settings(course_id, body.model_dump(exclude_unset=True))
        if course is None:
            raise HTTPException(status_code=404, detail="Course not found")
        return {"status": "success", "message": "Exam settings updated successfully", "data": course}
    except HTTPException:
        raise
    except Exception as e:
        _fail("update exam settings", e)


@router.get("/certifications/pending")
async def pending_certifications(admin: str = Depends(require_admin)):
    try:
        return CertificationService.pending_reviews()
    except Exception as e:
        _fail("load certification requests", e)


@router.post("/certifications/action")
async def certification_action(body: CertificationAction, admin: str = Depends(require_admin)):
    try:
        result = CertificationService.apply_admin_action(body.user_id, body.level, body.action)
        outcome = APPROVAL_ACTIONS[body.action]
        return {"status": "success", "message": f"Certification {outcome} successfully", "data": result}
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        _fail(f"{body.action} certification", e)


# ── Users ─────────────────────────────────────────────────────────
@router.get("/users")
async def list_users(admin: str = Depends(require_admin)):
    try:
        return UserAdminService.list_users()
    except Exception as e:
        _fail("fetch users data", e)


@router.put("/users/{user_id}/role")
async def change_role(user_id: str, body: RoleChange, admin: str = Depends(require_admin)):
    if user_id == admin and body.role != AppRole.ADMIN:
        raise HTTPException(status_code=400, detail="You cannot remove your own admin role")
    try:
        result = UserAdminService.change_role(user_id, body.role)
        return {"status": "success", "message": f"User role updated to {body.role.value}", "data": result}
    except Exception as e:
        _fail("update user role", e)
