from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class CertificationState(str, Enum):
    NEW_USER = "new-user"
    TRAINING_PROGRESS = "training-progress"
    EXAM = "exam"
    CONTRACT = "contract"
    SUBSCRIPTION = "subscription"
    COMPLETED = "completed"


class CertificationWorkflow(BaseModel):
    id: Optional[str] = None
    user_id: Optional[str] = None
    level: int
    current_step: Optional[str] = "exam"
    exam_status: Optional[str] = "pending_submission"  # pending_submission/under_review/passed/failed
    admin_approval_status: Optional[str] = "pending"   # pending/approved/rejected
    contract_status: Optional[str] = "pending_signature"  # pending_signature/signed/declined
    subscription_status: Optional[str] = "inactive"    # inactive/pending_payment/active/cancelled
    exam_submission_url: Optional[str] = None
    exam_results_json: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
