"""
user_admin_service.py — Back-office users overview & role management
"""

import logging

from supabase_rest import sb_select, sb_update, sb_upsert

from models.profile import AppRole
from services.progress_calculator import average_progress

logger = logging.getLogger(__name__)


class UserAdminService:
    @staticmethod
    def list_users() -> list:
        profiles = sb_select(
            "profiles",
            columns="user_id,first_name,last_name,employment_status,created_at",
        )
        roles = sb_select("user_roles", columns="user_id,role")
        progress_rows = sb_select("user_progress", columns="user_id,course_id,progress_percentage")
        completions = sb_select("course_completions", columns="user_id,course_id")
        total_courses = len(sb_select("courses", columns="id"))

        role_by_user = {r["user_id"]: r["role"] for r in roles}
        progress_by_user = {}
        for row in progress_rows:
            progress_by_user.setdefault(row["user_id"], []).append(row)
        completed_by_user = {}
        for row in completions:
            completed_by_user.setdefault(row["user_id"], set()).add(row["course_id"])

        users = []
        for p in profiles:
            uid = p["user_id"]
            users.append({
                "id": uid,
                "created_at": p.get("created_at"),
                "profile": {
                    "first_name": p.get("first_name"),
                    "last_name": p.get("last_name"),
                    "employment_status": p.get("employment_status"),
                },
                "role": role_by_user.get(uid, AppRole.STUDENT.value),
                "course_progress": {
                    "total_courses": total_courses,
                    "completed_courses": len(completed_by_user.get(uid, ())),
                    "overall_progress": average_progress(progress_by_user.get(uid, [])),
                },
            })
        return users

    @staticmethod
    def change_role(user_id: str, role: AppRole) -> dict:
        existing = sb_select("user_roles", filters={"user_id": user_id})
        if existing:
            result = sb_update("user_roles", "user_id", user_id, {"role": role.value})
        else:
            result = sb_upsert("user_roles", {"user_id": user_id, "role": role.value}, on_conflict="user_id")
        logger.info(f"Role for {user_id} set to {role.value}")
        return result
