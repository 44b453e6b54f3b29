from enum import Enum


class SubsectionType(str, Enum):
    CONTENT = "content"  # reading material or video
    QUIZ = "quiz"


class CourseStatus(str, Enum):
    AVAILABLE = "available"
    LOCKED = "locked"
    COMING_SOON = "coming-soon"
    COMPLETED = "completed"
