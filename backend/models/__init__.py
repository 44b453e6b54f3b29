# Row shapes and enums shared by the services

from models.course import CourseStatus, SubsectionType
from models.progress import CourseProgress
from models.certification_workflow import CertificationState, CertificationWorkflow
from models.profile import AppRole
