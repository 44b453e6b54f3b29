"""
course_service.py — Learner-facing course screens
Fetches the course → section → subsection hierarchy and the learner's
progress rows, and assembles the dashboard, course page and subsection
viewer payloads. Every call recomputes from a fresh snapshot.
"""

import logging
from datetime import datetime, timezone

from supabase_rest import sb_select, sb_insert, sb_update

from models.certification_workflow import CertificationWorkflow
from services.certification_state import derive_state, call_to_action
from services.progress_calculator import (
    calculate_progress,
    count_course_items,
    course_progress,
    course_status,
    lesson_accessible,
    pick_current_course,
    subsection_type_label,
    total_duration,
)

logger = logging.getLogger(__name__)


def _nest(courses: list, sections: list, subsections: list) -> list:
    subs_by_section = {}
    for sub in subsections:
        subs_by_section.setdefault(sub["section_id"], []).append(sub)
    sections_by_course = {}
    for section in sections:
        section = {**section, "subsections": subs_by_section.get(section["id"], [])}
        sections_by_course.setdefault(section["course_id"], []).append(section)
    return [{**c, "sections": sections_by_course.get(c["id"], [])} for c in courses]


def _flatten(sections: list) -> list:
    """Subsections in reading order: by section, then by position in the section."""
    return [sub for section in sections for sub in section.get("subsections") or []]


class CourseService:
    @staticmethod
    def get_courses_with_content(course_filters: dict = None) -> list:
        """Courses ordered by level, each with ordered sections and subsections."""
        courses = sb_select("courses", filters=course_filters, order="level.asc")
        sections = sb_select(
            "sections",
            in_filters={"course_id": [c["id"] for c in courses]},
            order="order_index.asc",
        )
        subsections = sb_select(
            "subsections",
            in_filters={"section_id": [s["id"] for s in sections]},
            order="order_index.asc",
        )
        return _nest(courses, sections, subsections)

    @staticmethod
    def get_workflows_by_level(user_id: str) -> dict:
        rows = sb_select("certification_workflows", filters={"user_id": user_id})
        return {row["level"]: CertificationWorkflow(**row) for row in rows}

    @staticmethod
    def dashboard(user_id: str) -> dict:
        courses = CourseService.get_courses_with_content()
        progress_rows = sb_select(
            "user_progress",
            filters={"user_id": user_id},
            columns="course_id,subsection_id,lesson_id,completed_at",
        )
        workflows = CourseService.get_workflows_by_level(user_id)
        has_started = len(progress_rows) > 0

        cards = []
        for course in courses:
            progress = course_progress(course, progress_rows)
            workflow = workflows.get(course["level"])
            state = derive_state(progress.percentage, workflow, has_progress=has_started)
            cards.append({
                "id": course["id"],
                "title": course["title"],
                "description": course.get("description"),
                "level": course["level"],
                "is_available": course.get("is_available", False),
                "is_coming_soon": course.get("is_coming_soon", False),
                "total_items": count_course_items(course["sections"]),
                "has_structured_content": len(course["sections"]) > 0,
                "status": course_status(course, progress.percentage).value,
                "progress": progress.model_dump(),
                "certification": {
                    "state": state.value,
                    "call_to_action": call_to_action(state, course, workflow),
                    "workflow": workflow.model_dump(mode="json") if workflow else None,
                },
            })

        current = pick_current_course(courses)
        return {
            "has_started": has_started,
            "current_course_id": current["id"] if current else None,
            "courses": cards,
        }

    @staticmethod
    def course_page(user_id: str, course_id: str) -> dict | None:
        rows = sb_select("courses", filters={"id": course_id})
        if not rows:
            return None
        course = rows[0]

        sections = sb_select("sections", filters={"course_id": course_id}, order="order_index.asc")
        progress_rows = sb_select(
            "user_progress",
            filters={"course_id": course_id, "user_id": user_id},
            columns="subsection_id,lesson_id,completed_at",
            not_null=["completed_at"],
        )

        if sections:
            subsections = sb_select(
                "subsections",
                in_filters={"section_id": [s["id"] for s in sections]},
                order="order_index.asc",
            )
            sections = _nest([course], sections, subsections)[0]["sections"]
            completed = {r["subsection_id"] for r in progress_rows if r.get("subsection_id")}
            progress = calculate_progress(count_course_items(sections), completed)
            for section in sections:
                for sub in section["subsections"]:
                    sub["completed"] = sub["id"] in completed
                    sub["type_label"] = subsection_type_label(sub)
            return {
                "course": course,
                "has_structured_content": True,
                "sections": sections,
                "lessons": [],
                "completed_item_ids": sorted(completed),
                "progress": progress.model_dump(),
                "total_duration_minutes": total_duration(_flatten(sections)),
            }

        # Courses authored before sections existed
        lessons = sb_select("lessons", filters={"course_id": course_id}, order="order_index.asc")
        completed = {r["lesson_id"] for r in progress_rows if r.get("lesson_id")}
        progress = calculate_progress(len(lessons), completed)
        lessons = [
            {
                **lesson,
                "completed": lesson["id"] in completed,
                "accessible": lesson_accessible(lessons, i, completed),
            }
            for i, lesson in enumerate(lessons)
        ]
        return {
            "course": course,
            "has_structured_content": False,
            "sections": [],
            "lessons": lessons,
            "completed_item_ids": sorted(completed),
            "progress": progress.model_dump(),
            "total_duration_minutes": total_duration(lessons),
        }

    @staticmethod
    def _subsection_in_course(course_id: str, subsection_id: str):
        rows = sb_select("subsections", filters={"id": subsection_id})
        if not rows:
            return None, None
        subsection = rows[0]
        sections = sb_select("sections", filters={"id": subsection["section_id"]})
        if not sections or sections[0]["course_id"] != course_id:
            return None, None
        return subsection, sections[0]

    @staticmethod
    def subsection_page(user_id: str, course_id: str, subsection_id: str) -> dict | None:
        subsection, section = CourseService._subsection_in_course(course_id, subsection_id)
        if subsection is None:
            return None

        course_sections = sb_select("sections", filters={"course_id": course_id}, order="order_index.asc")
        all_subsections = sb_select(
            "subsections",
            in_filters={"section_id": [s["id"] for s in course_sections]},
            columns="id,section_id,title,subsection_type,video_url,order_index",
            order="order_index.asc",
        )
        ordered = _flatten(_nest([{"id": course_id}], course_sections, all_subsections)[0]["sections"])
        index = next((i for i, s in enumerate(ordered) if s["id"] == subsection_id), -1)
        previous = ordered[index - 1] if index > 0 else None
        following = ordered[index + 1] if 0 <= index < len(ordered) - 1 else None

        progress_rows = sb_select(
            "user_progress",
            filters={"user_id": user_id, "subsection_id": subsection_id},
            columns="completed_at",
        )
        return {
            "subsection": subsection,
            "section": section,
            "type_label": subsection_type_label(subsection),
            "is_completed": any(r.get("completed_at") for r in progress_rows),
            "position": index + 1,
            "count": len(ordered),
            "previous": previous,
            "next": following,
        }

    @staticmethod
    def complete_subsection(user_id: str, course_id: str, subsection_id: str) -> dict | None:
        subsection, _ = CourseService._subsection_in_course(course_id, subsection_id)
        if subsection is None:
            return None
        data = {
            "user_id": user_id,
            "course_id": course_id,
            "subsection_id": subsection_id,
            "completed_at": datetime.now(timezone.utc).isoformat(),
            "progress_percentage": 100,
        }
        # user_progress has no unique key on (user_id, subsection_id); duplicates may already exist.
        existing = sb_select(
            "user_progress",
            filters={"user_id": user_id, "subsection_id": subsection_id},
            columns="id",
            limit=1,
        )
        if existing:
            record = sb_update("user_progress", "id", existing[0]["id"], data)
        else:
            record = sb_insert("user_progress", data)
        logger.info(f"User {user_id} completed subsection {subsection_id}")
        return record
