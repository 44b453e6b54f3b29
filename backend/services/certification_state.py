"""
certification_state.py — Certification pipeline derivation
Maps a learner's course completion and per-level workflow flags onto one of
the pipeline stages (training → exam → contract → subscription) and the
call-to-action the dashboard shows for it.
"""

from typing import Optional

from models.certification_workflow import CertificationState, CertificationWorkflow


def derive_state(
    percentage: int,
    workflow: Optional[CertificationWorkflow] = None,
    has_progress: bool = True,
) -> CertificationState:
    """
    First match wins, so the furthest stage reached is reported even when
    earlier conditions also hold. A workflow record counts as progress.
    """
    if not has_progress and workflow is None:
        return CertificationState.NEW_USER

    if workflow is not None:
        if workflow.subscription_status == "active":
            return CertificationState.COMPLETED
        if workflow.contract_status == "signed":
            return CertificationState.SUBSCRIPTION
        if workflow.admin_approval_status == "approved" or workflow.exam_status == "passed":
            return CertificationState.CONTRACT

    if percentage >= 100:
        return CertificationState.EXAM
    if percentage > 0:
        return CertificationState.TRAINING_PROGRESS
    return CertificationState.NEW_USER


def call_to_action(
    state: CertificationState,
    course: dict,
    workflow: Optional[CertificationWorkflow] = None,
) -> dict:
    level = course.get("level")
    course_path = f"/course/{course.get('id')}"
    cert_path = f"/certification/{level}"

    if state == CertificationState.NEW_USER:
        return {"action": "start_course", "label": f"Start Level {level}", "path": course_path}

    if state == CertificationState.TRAINING_PROGRESS:
        return {"action": "resume_course", "label": "Resume Course", "path": course_path}

    if state == CertificationState.EXAM:
        if workflow is None:
            return {
                "action": "start_certification",
                "label": "Start Certification Process",
                "path": f"{cert_path}/exam",
            }
        if workflow.exam_status in ("under_review", "submitted"):
            return {"action": "exam_under_review", "label": "Exam Under Review", "path": None}
        return {"action": "take_exam", "label": "Take Certification Exam", "path": f"{cert_path}/exam"}

    if state == CertificationState.CONTRACT:
        if workflow is not None and workflow.admin_approval_status == "pending":
            return {"action": "awaiting_approval", "label": "Awaiting Admin Approval", "path": None}
        return {"action": "sign_contract", "label": "Sign Contract", "path": f"{cert_path}/contract"}

    if state == CertificationState.SUBSCRIPTION:
        return {"action": "complete_payment", "label": "Complete Payment", "path": f"{cert_path}/payment"}

    return {"action": "certification_complete", "label": "Certification Complete!", "path": None}
