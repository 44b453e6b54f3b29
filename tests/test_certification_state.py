"""
Tests for the certification stage derivation and its calls to action.
"""
import pytest

from models.certification_workflow import CertificationState, CertificationWorkflow
from services.certification_state import call_to_action, derive_state

COURSE = {"id": "course-1", "level": 1}


def wf(**kwargs):
    return CertificationWorkflow(level=1, **kwargs)


class TestDeriveState:
    def test_no_workflow_no_progress_is_new_user(self):
        assert derive_state(0, None, has_progress=False) == CertificationState.NEW_USER

    def test_no_workflow_zero_percent_is_new_user(self):
        assert derive_state(0, None) == CertificationState.NEW_USER

    def test_no_workflow_partial_progress_is_training(self):
        assert derive_state(45, None) == CertificationState.TRAINING_PROGRESS

    def test_full_progress_is_exam(self):
        assert derive_state(100, None) == CertificationState.EXAM

    def test_no_progress_records_wins_over_percentage(self):
        assert derive_state(100, None, has_progress=False) == CertificationState.NEW_USER

    @pytest.mark.parametrize("percentage", [0, 45, 100])
    @pytest.mark.parametrize("has_progress", [True, False])
    @pytest.mark.parametrize("others", [
        {},
        {"contract_status": "signed"},
        {"admin_approval_status": "approved", "exam_status": "passed"},
        {"exam_status": "failed", "admin_approval_status": "rejected", "contract_status": "declined"},
    ])
    def test_active_subscription_is_always_completed(self, percentage, has_progress, others):
        workflow = wf(subscription_status="active", **others)
        assert derive_state(percentage, workflow, has_progress) == CertificationState.COMPLETED

    def test_signed_contract_is_subscription(self):
        workflow = wf(contract_status="signed", exam_status="passed")
        assert derive_state(100, workflow) == CertificationState.SUBSCRIPTION

    def test_passed_exam_is_contract_even_at_full_progress(self):
        workflow = wf(exam_status="passed", contract_status="pending")
        assert derive_state(100, workflow) == CertificationState.CONTRACT

    def test_admin_approval_alone_is_contract(self):
        workflow = wf(admin_approval_status="approved", exam_status="under_review")
        assert derive_state(100, workflow) == CertificationState.CONTRACT

    def test_workflow_without_milestones_falls_back_to_percentage(self):
        assert derive_state(100, wf()) == CertificationState.EXAM
        assert derive_state(60, wf()) == CertificationState.TRAINING_PROGRESS

    def test_workflow_counts_as_progress(self):
        workflow = wf(exam_status="passed")
        assert derive_state(0, workflow, has_progress=False) == CertificationState.CONTRACT


class TestCallToAction:
    def test_new_user_starts_course(self):
        cta = call_to_action(CertificationState.NEW_USER, COURSE)
        assert cta["action"] == "start_course"
        assert cta["label"] == "Start Level 1"
        assert cta["path"] == "/course/course-1"

    def test_training_resumes_course(self):
        assert call_to_action(CertificationState.TRAINING_PROGRESS, COURSE)["action"] == "resume_course"

    def test_exam_without_workflow_starts_certification(self):
        cta = call_to_action(CertificationState.EXAM, COURSE)
        assert cta["action"] == "start_certification"
        assert cta["path"] == "/certification/1/exam"

    def test_exam_pending_submission(self):
        cta = call_to_action(CertificationState.EXAM, COURSE, wf(exam_status="pending_submission"))
        assert cta["action"] == "take_exam"

    def test_exam_under_review(self):
        cta = call_to_action(CertificationState.EXAM, COURSE, wf(exam_status="under_review"))
        assert cta["action"] == "exam_under_review"
        assert cta["path"] is None

    def test_contract_awaiting_approval(self):
        workflow = wf(exam_status="passed", admin_approval_status="pending")
        assert call_to_action(CertificationState.CONTRACT, COURSE, workflow)["action"] == "awaiting_approval"

    def test_contract_sign(self):
        workflow = wf(admin_approval_status="approved")
        cta = call_to_action(CertificationState.CONTRACT, COURSE, workflow)
        assert cta["action"] == "sign_contract"
        assert cta["path"] == "/certification/1/contract"

    def test_subscription_payment(self):
        cta = call_to_action(CertificationState.SUBSCRIPTION, COURSE, wf(contract_status="signed"))
        assert cta["path"] == "/certification/1/payment"

    def test_completed(self):
        cta = call_to_action(CertificationState.COMPLETED, COURSE, wf(subscription_status="active"))
        assert cta["action"] == "certification_complete"
