from pydantic import BaseModel


class CourseProgress(BaseModel):
    completed: int = 0
    total: int = 0
    percentage: int = 0
