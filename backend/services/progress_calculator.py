"""
progress_calculator.py — Course completion arithmetic
Counts learning items across the course → section → subsection hierarchy,
dedupes completion records and turns them into a percentage. Also holds the
small display rules that hang off those numbers (course status, current
course, legacy lesson gating, subsection labels).
"""

import math
from typing import Iterable, Optional

from models.course import CourseStatus, SubsectionType
from models.progress import CourseProgress


def calculate_progress(total_count: int, completed_ids: Iterable) -> CourseProgress:
    """Percentage complete, rounded half-up; 0 when the course has no items."""
    completed = len(set(completed_ids))
    total = max(int(total_count or 0), 0)
    if total == 0:
        return CourseProgress(completed=completed, total=0, percentage=0)
    percentage = int(math.floor(100 * completed / total + 0.5))
    return CourseProgress(completed=completed, total=total, percentage=percentage)


def count_course_items(sections: list) -> int:
    """Total subsections across a course's sections."""
    return sum(len(s.get("subsections") or []) for s in sections or [])


def completed_item_ids(progress_rows: list, course_id: Optional[str] = None) -> set:
    """Distinct subsection/lesson ids with a completion timestamp."""
    ids = set()
    for row in progress_rows or []:
        if course_id is not None and row.get("course_id") != course_id:
            continue
        if not row.get("completed_at"):
            continue
        item_id = row.get("subsection_id") or row.get("lesson_id")
        if item_id:
            ids.add(item_id)
    return ids


def course_progress(course: dict, progress_rows: list) -> CourseProgress:
    """Progress for a course dict carrying nested `sections[].subsections[]`."""
    total = count_course_items(course.get("sections"))
    return calculate_progress(total, completed_item_ids(progress_rows, course.get("id")))


def average_progress(progress_rows: list) -> int:
    """Rounded mean of the stored progress_percentage values."""
    if not progress_rows:
        return 0
    total = sum(r.get("progress_percentage") or 0 for r in progress_rows)
    return int(math.floor(total / len(progress_rows) + 0.5))


def course_status(course: dict, percentage: int = 0) -> CourseStatus:
    # Only level 1 opens by itself; higher levels unlock through certification.
    if course.get("level") == 1 and course.get("is_available"):
        if percentage >= 100:
            return CourseStatus.COMPLETED
        return CourseStatus.AVAILABLE
    if (course.get("level") or 0) > 1:
        return CourseStatus.LOCKED
    if course.get("is_coming_soon"):
        return CourseStatus.COMING_SOON
    return CourseStatus.LOCKED


def pick_current_course(courses: list) -> Optional[dict]:
    """First course the learner can work on, falling back to the first course."""
    for course in courses:
        if course_status(course) == CourseStatus.AVAILABLE:
            return course
    return courses[0] if courses else None


def lesson_accessible(lessons: list, index: int, completed_ids: set) -> bool:
    if index == 0:
        return True
    if index < 0 or index >= len(lessons):
        return False
    return lessons[index - 1].get("id") in completed_ids


def total_duration(items: list) -> int:
    return sum(i.get("duration_minutes") or 0 for i in items or [])


def subsection_type_label(subsection: dict) -> str:
    if subsection.get("subsection_type") == SubsectionType.QUIZ.value:
        return "Quiz"
    return "Video Lesson" if subsection.get("video_url") else "Reading Material"
