"""
content_service.py — Back-office content management
CRUD for courses, sections and subsections. New sections and subsections are
appended after the existing ones of their parent.
"""

import logging

from supabase_rest import sb_select, sb_insert, sb_update, sb_delete, sb_count

logger = logging.getLogger(__name__)


class ContentService:
    # --- Courses ------------------------------------------------------
    @staticmethod
    def list_courses() -> list:
        return sb_select("courses", order="level.asc")

    @staticmethod
    def get_course(course_id: str) -> dict | None:
        rows = sb_select("courses", filters={"id": course_id})
        return rows[0] if rows else None

    @staticmethod
    def create_course(data: dict) -> dict:
        course = sb_insert("courses", data)
        logger.info(f"Course created: {course.get('id')} ({data.get('title')})")
        return course

    @staticmethod
    def update_course(course_id: str, data: dict) -> dict | None:
        if ContentService.get_course(course_id) is None:
            return None
        return sb_update("courses", "id", course_id, data)

    @staticmethod
    def delete_course(course_id: str) -> bool:
        """Sections and subsections go with it (cascade on the platform)."""
        if ContentService.get_course(course_id) is None:
            return False
        sb_delete("courses", "id", course_id)
        logger.info(f"Course deleted: {course_id}")
        return True

    @staticmethod
    def toggle_availability(course_id: str) -> dict | None:
        course = ContentService.get_course(course_id)
        if course is None:
            return None
        return sb_update("courses", "id", course_id, {"is_available": not course.get("is_available")})

    # --- Sections -----------------------------------------------------
    @staticmethod
    def list_sections(course_id: str) -> list:
        return sb_select("sections", filters={"course_id": course_id}, order="order_index.asc")

    @staticmethod
    def get_section(section_id: str) -> dict | None:
        rows = sb_select("sections", filters={"id": section_id})
        return rows[0] if rows else None

    @staticmethod
    def create_section(course_id: str, data: dict) -> dict | None:
        if ContentService.get_course(course_id) is None:
            return None
        data = {
            **data,
            "course_id": course_id,
            "order_index": sb_count("sections", filters={"course_id": course_id}),
        }
        return sb_insert("sections", data)

    @staticmethod
    def update_section(section_id: str, data: dict) -> dict | None:
        if ContentService.get_section(section_id) is None:
            return None
        return sb_update("sections", "id", section_id, data)

    @staticmethod
    def delete_section(section_id: str) -> bool:
        if ContentService.get_section(section_id) is None:
            return False
        sb_delete("sections", "id", section_id)
        logger.info(f"Section deleted: {section_id}")
        return True

    @staticmethod
    def section_info(section_id: str) -> dict | None:
        """Section with its course's title and level, for the subsection editor."""
        section = ContentService.get_section(section_id)
        if section is None:
            return None
        course = ContentService.get_course(section["course_id"]) or {}
        return {
            "id": section["id"],
            "title": section.get("title"),
            "course_id": section["course_id"],
            "course_title": course.get("title"),
            "course_level": course.get("level"),
            "subsection_count": sb_count("subsections", filters={"section_id": section_id}),
        }

    # --- Subsections --------------------------------------------------
    @staticmethod
    def list_subsections(section_id: str) -> list:
        return sb_select("subsections", filters={"section_id": section_id}, order="order_index.asc")

    @staticmethod
    def get_subsection(subsection_id: str) -> dict | None:
        rows = sb_select("subsections", filters={"id": subsection_id})
        return rows[0] if rows else None

    @staticmethod
    def create_subsection(section_id: str, data: dict) -> dict | None:
        if ContentService.get_section(section_id) is None:
            return None
        data = {
            **data,
            "section_id": section_id,
            "order_index": sb_count("subsections", filters={"section_id": section_id}),
        }
        return sb_insert("subsections", data)

    @staticmethod
    def update_subsection(subsection_id: str, data: dict) -> dict | None:
        if ContentService.get_subsection(subsection_id) is None:
            return None
        return sb_update("subsections", "id", subsection_id, data)

    @staticmethod
    def delete_subsection(subsection_id: str) -> bool:
        if ContentService.get_subsection(subsection_id) is None:
            return False
        sb_delete("subsections", "id", subsection_id)
        return True
