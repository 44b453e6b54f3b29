from enum import Enum


class AppRole(str, Enum):
    STUDENT = "student"
    ADMIN = "admin"
