from jobboard.models.job import JobPosting, JOB_STATUSES, JOB_TYPES, LOCATION_TYPES
from jobboard.models.application import Application, APPLICATION_STATUSES
from jobboard.models.member import Member

__all__ = [
    "JobPosting",
    "Application",
    "Member",
    "JOB_STATUSES",
    "JOB_TYPES",
    "LOCATION_TYPES",
    "APPLICATION_STATUSES",
]
