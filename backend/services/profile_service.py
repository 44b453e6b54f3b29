"""
profile_service.py — Learner profile & achievements
"""

import logging

from supabase_rest import sb_select, sb_update

from services.progress_calculator import average_progress

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("first_name", "last_name", "address", "employment_status")


class ProfileService:
    @staticmethod
    def get_profile(user_id: str) -> dict | None:
        rows = sb_select("profiles", filters={"user_id": user_id})
        if not rows:
            return None
        profile = rows[0]

        roles = sb_select("user_roles", filters={"user_id": user_id}, columns="role")
        progress_rows = sb_select("user_progress", filters={"user_id": user_id})
        completions = sb_select("course_completions", filters={"user_id": user_id})
        courses = sb_select(
            "courses",
            in_filters={"id": [c["course_id"] for c in completions]},
            columns="id,title,level",
        )
        courses_by_id = {c["id"]: c for c in courses}

        first = profile.get("first_name") or ""
        last = profile.get("last_name") or ""
        return {
            "profile": profile,
            "role": roles[0]["role"] if roles else "student",
            "initials": f"{first[:1]}{last[:1]}".upper(),
            "overall_progress": average_progress(progress_rows),
            "completions": [
                {
                    **c,
                    "course_title": courses_by_id.get(c["course_id"], {}).get("title"),
                    "course_level": courses_by_id.get(c["course_id"], {}).get("level"),
                }
                for c in completions
            ],
        }

    @staticmethod
    def update_profile(user_id: str, data: dict) -> dict:
        changes = {k: v for k, v in data.items() if k in EDITABLE_FIELDS}
        if not changes:
            raise ValueError("No profile fields to update")
        result = sb_update("profiles", "user_id", user_id, changes)
        logger.info(f"Profile updated for {user_id}: {sorted(changes)}")
        return result
