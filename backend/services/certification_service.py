"""
certification_service.py — Certification pipeline (training → exam → contract → subscription)
Learner side: per-level status, starting a workflow, exam submission and
contract signing. Admin side: exam settings, the pending-approval queue and
the approve/reject decision, which is applied by an edge function on the
hosted platform.
"""

import logging
from datetime import datetime, timezone

from supabase_rest import sb_select, sb_insert, sb_update
from supabase_client import invoke_function
from config import ADMIN_CERTIFICATION_FUNCTION

from models.certification_workflow import CertificationWorkflow, CertificationState
from services.certification_state import derive_state, call_to_action
from services.course_service import CourseService
from services.progress_calculator import course_progress

logger = logging.getLogger(__name__)

EXAM_FIELDS = ("exam_instructions", "exam_url", "exam_duration_minutes")
APPROVAL_ACTIONS = {"approve": "approved", "reject": "rejected"}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class CertificationService:
    # ------------------------------------------------------------------
    # Learner
    # ------------------------------------------------------------------
    @staticmethod
    def list_workflows(user_id: str) -> list:
        return sb_select("certification_workflows", filters={"user_id": user_id}, order="level.asc")

    @staticmethod
    def _workflow_row(user_id: str, level: int) -> dict | None:
        rows = sb_select("certification_workflows", filters={"user_id": user_id, "level": level})
        return rows[0] if rows else None

    @staticmethod
    def level_status(user_id: str, level: int) -> dict | None:
        courses = CourseService.get_courses_with_content({"level": level})
        if not courses:
            return None
        course = courses[0]

        progress_rows = sb_select(
            "user_progress",
            filters={"user_id": user_id},
            columns="course_id,subsection_id,lesson_id,completed_at",
        )
        row = CertificationService._workflow_row(user_id, level)
        workflow = CertificationWorkflow(**row) if row else None
        progress = course_progress(course, progress_rows)
        state = derive_state(progress.percentage, workflow, has_progress=len(progress_rows) > 0)
        return {
            "level": level,
            "course_id": course["id"],
            "course_title": course["title"],
            "progress": progress.model_dump(),
            "state": state.value,
            "call_to_action": call_to_action(state, course, workflow),
            "workflow": row,
        }

    @staticmethod
    def start(user_id: str, level: int) -> dict | None:
        status = CertificationService.level_status(user_id, level)
        if status is None:
            return None
        if status["workflow"]:
            return status["workflow"]
        if status["state"] != CertificationState.EXAM.value:
            raise ValueError("Complete the course before starting certification")

        workflow = sb_insert("certification_workflows", {
            "user_id": user_id,
            "level": level,
            "current_step": "exam",
            "exam_status": "pending_submission",
            "admin_approval_status": "not_submitted",
            "contract_status": "pending_signature",
            "subscription_status": "inactive",
        })
        logger.info(f"Certification workflow started for {user_id} at level {level}")
        return workflow

    @staticmethod
    def exam_settings(level: int) -> dict | None:
        rows = sb_select(
            "courses",
            filters={"level": level},
            columns="id,title,level,exam_instructions,exam_url,exam_duration_minutes",
        )
        return rows[0] if rows else None

    @staticmethod
    def submit_exam(user_id: str, level: int, submission_url: str = None, results: dict = None) -> dict | None:
        row = CertificationService._workflow_row(user_id, level)
        if row is None:
            return None
        if row.get("exam_status") in ("under_review", "passed"):
            raise ValueError("Exam already submitted")

        data = {
            "current_step": "admin_approval",
            "exam_status": "under_review",
            "admin_approval_status": "pending",
            "updated_at": _now(),
        }
        if submission_url is not None:
            data["exam_submission_url"] = submission_url
        if results is not None:
            data["exam_results_json"] = results
        return sb_update("certification_workflows", "id", row["id"], data)

    @staticmethod
    def sign_contract(user_id: str, level: int) -> dict | None:
        row = CertificationService._workflow_row(user_id, level)
        if row is None:
            return None
        if row.get("admin_approval_status") != "approved" and row.get("exam_status") != "passed":
            raise ValueError("Certification has not been approved yet")
        if row.get("contract_status") == "signed":
            return row

        return sb_update("certification_workflows", "id", row["id"], {
            "current_step": "payment",
            "contract_status": "signed",
            "subscription_status": "pending_payment",
            "updated_at": _now(),
        })

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------
    @staticmethod
    def list_exam_settings() -> list:
        return sb_select(
            "courses",
            columns="id,title,level,exam_instructions,exam_url,exam_duration_minutes",
            order="level.asc",
        )

    @staticmethod
    def update_exam_settings(course_id: str, data: dict) -> dict | None:
        if not sb_select("courses", filters={"id": course_id}, columns="id"):
            return None
        changes = {k: v for k, v in data.items() if k in EXAM_FIELDS}
        return sb_update("courses", "id", course_id, changes)

    @staticmethod
    def pending_reviews() -> list:
        workflows = sb_select(
            "certification_workflows",
            filters={"admin_approval_status": "pending"},
            order="created_at.desc",
        )
        profiles = sb_select(
            "profiles",
            in_filters={"user_id": list({w["user_id"] for w in workflows})},
            columns="user_id,first_name,last_name",
        )
        by_user = {p["user_id"]: p for p in profiles}
        return [
            {
                **w,
                "first_name": by_user.get(w["user_id"], {}).get("first_name") or "",
                "last_name": by_user.get(w["user_id"], {}).get("last_name") or "",
            }
            for w in workflows
        ]

    @staticmethod
    def apply_admin_action(user_id: str, level: int, action: str) -> dict:
        if action not in APPROVAL_ACTIONS:
            raise ValueError(f"Unknown action: {action}")
        result = invoke_function(
            ADMIN_CERTIFICATION_FUNCTION,
            {"user_id": user_id, "level": level, "action": action},
        )
        logger.info(f"Certification {action} applied for {user_id} at level {level}")
        return result
