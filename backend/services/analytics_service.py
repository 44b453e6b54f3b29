"""
analytics_service.py — Back-office progress analytics
Builds one row per (learner, course) pair from the progress table, joined
with profiles, courses and subsection counts; filters those rows; computes
the headline statistics and renders the CSV export.
"""

import csv
import io
import logging
from datetime import datetime, timezone, timedelta

from pydantic import TypeAdapter

from supabase_rest import sb_select, sb_count

from services.progress_calculator import calculate_progress

logger = logging.getLogger(__name__)

ACTIVE_WINDOW_DAYS = 30

CSV_HEADERS = [
    "User Name",
    "Email",
    "Course",
    "Level",
    "Progress %",
    "Completed Subsections",
    "Total Subsections",
    "Status",
    "Last Activity",
    "Completion Date",
    "Employment Status",
]


_TIMESTAMP = TypeAdapter(datetime)


def _parse_ts(value) -> datetime | None:
    if not value:
        return None
    ts = _TIMESTAMP.validate_python(value)
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def _fmt_date(value) -> str:
    ts = _parse_ts(value)
    return ts.strftime("%b %d, %Y") if ts else "N/A"


def progress_status(row: dict) -> str:
    if row.get("completion_date"):
        return "completed"
    if row.get("progress_percentage", 0) > 0:
        return "in-progress"
    return "not-started"


class AnalyticsService:

    @staticmethod
    def subsection_counts() -> dict:
        """{course_id: number of subsections}"""
        sections = sb_select("sections", columns="id,course_id")
        course_of_section = {s["id"]: s["course_id"] for s in sections}
        subsections = sb_select("subsections", columns="id,section_id")
        counts = {}
        for sub in subsections:
            course_id = course_of_section.get(sub["section_id"])
            if course_id is not None:
                counts[course_id] = counts.get(course_id, 0) + 1
        return counts

    @staticmethod
    def progress_rows() -> list:
        progress = sb_select(
            "user_progress",
            columns="user_id,course_id,subsection_id,progress_percentage,completed_at,updated_at",
            order="updated_at.desc.nullslast",
        )
        profiles = sb_select("profiles", columns="user_id,first_name,last_name,employment_status")
        courses = sb_select("courses", columns="id,title,level")
        completions = sb_select("course_completions", columns="user_id,course_id,completed_at")
        totals = AnalyticsService.subsection_counts()

        profile_by_user = {p["user_id"]: p for p in profiles}
        course_by_id = {c["id"]: c for c in courses}
        completion_by_pair = {(c["user_id"], c["course_id"]): c.get("completed_at") for c in completions}

        # Rows arrive newest first, so the first row of a pair carries its last activity.
        pairs = {}
        for row in progress:
            key = (row["user_id"], row["course_id"])
            entry = pairs.setdefault(key, {"last_activity": row.get("updated_at"), "completed": set()})
            if row.get("completed_at") and row.get("subsection_id"):
                entry["completed"].add(row["subsection_id"])

        rows = []
        for (user_id, course_id), entry in pairs.items():
            profile = profile_by_user.get(user_id)
            course = course_by_id.get(course_id, {})
            progress_ = calculate_progress(totals.get(course_id, 0), entry["completed"])
            rows.append({
                "user_id": user_id,
                "user_name": f"{profile.get('first_name') or ''} {profile.get('last_name') or ''}".strip()
                if profile else "Unknown User",
                "user_email": "N/A",
                "course_id": course_id,
                "course_title": course.get("title") or "Unknown Course",
                "course_level": course.get("level") or 0,
                "total_subsections": progress_.total,
                "completed_subsections": progress_.completed,
                "progress_percentage": progress_.percentage,
                "last_activity": entry["last_activity"],
                "completion_date": completion_by_pair.get((user_id, course_id)),
                "employment_status": (profile or {}).get("employment_status") or "N/A",
            })
        return rows

    @staticmethod
    def filter_rows(
        rows: list,
        search: str = None,
        course_id: str = None,
        status: str = None,
        employment_status: str = None,
    ) -> list:
        """Each filter is skipped when empty or "all"."""
        filtered = rows
        if search:
            term = search.lower()
            filtered = [
                r for r in filtered
                if term in r["user_name"].lower()
                or term in r["user_email"].lower()
                or term in r["course_title"].lower()
            ]
        if course_id and course_id != "all":
            filtered = [r for r in filtered if r["course_id"] == course_id]
        if status and status != "all":
            filtered = [r for r in filtered if progress_status(r) == status]
        if employment_status and employment_status != "all":
            filtered = [r for r in filtered if r["employment_status"] == employment_status]
        return filtered

    @staticmethod
    def stats(now: datetime = None) -> dict:
        now = now or datetime.now(timezone.utc)
        total_users = sb_count("profiles")
        total_courses = sb_count("courses")
        total_completions = sb_count("course_completions")

        cutoff = now - timedelta(days=ACTIVE_WINDOW_DAYS)
        activity = sb_select("user_progress", columns="user_id,updated_at")
        active_users = {
            r["user_id"] for r in activity
            if _parse_ts(r.get("updated_at")) and _parse_ts(r["updated_at"]) >= cutoff
        }

        return {
            "total_users": total_users,
            "total_courses": total_courses,
            "total_completions": total_completions,
            "average_completion_rate": round(total_completions / total_users * 100, 1) if total_users else 0.0,
            "active_users_last_30_days": len(active_users),
        }

    @staticmethod
    def to_csv(rows: list) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(CSV_HEADERS)
        for r in rows:
            status = progress_status(r)
            writer.writerow([
                r["user_name"],
                r["user_email"],
                r["course_title"],
                r["course_level"],
                f"{float(r['progress_percentage']):.1f}",
                r["completed_subsections"],
                r["total_subsections"],
                {"completed": "Completed", "in-progress": "In Progress"}.get(status, "Not Started"),
                _fmt_date(r["last_activity"]),
                _fmt_date(r["completion_date"]),
                r["employment_status"],
            ])
        return buf.getvalue()
