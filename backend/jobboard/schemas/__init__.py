from jobboard.schemas.job import (
    JobDetails,
    SubmitterInfo,
    SubmissionRequest,
    SubmissionResponse,
    LookupRequest,
    LookupResponse,
    JobUpdate,
    JobResponse,
    JobTeaser,
    JobListResponse,
    ListingStats,
    PosterJobSummary,
    PosterJobResponse,
    DashboardStats,
    DashboardResponse,
    RejectRequest,
)
from jobboard.schemas.application import (
    ApplicationResponse,
    ApplicationStatusUpdate,
    ApplicantsResponse,
)
from jobboard.schemas.question import (
    CustomQuestion,
    QuestionDraft,
    DraftEdit,
    QuestionUpdate,
    OptionAdd,
    MoveRequest,
    QuestionBuilderState,
    CHOICE_TYPES,
)
from jobboard.schemas.auth import (
    OtpSendRequest,
    OtpVerifyRequest,
    SessionResponse,
    LoginRequest,
    LoginResponse,
)
from jobboard.schemas.member import UnsubscribeResponse

__all__ = [
    "JobDetails",
    "SubmitterInfo",
    "SubmissionRequest",
    "SubmissionResponse",
    "LookupRequest",
    "LookupResponse",
    "JobUpdate",
    "JobResponse",
    "JobTeaser",
    "JobListResponse",
    "ListingStats",
    "PosterJobSummary",
    "PosterJobResponse",
    "DashboardStats",
    "DashboardResponse",
    "RejectRequest",
    "ApplicationResponse",
    "ApplicationStatusUpdate",
    "ApplicantsResponse",
    "CustomQuestion",
    "QuestionDraft",
    "DraftEdit",
    "QuestionUpdate",
    "OptionAdd",
    "MoveRequest",
    "QuestionBuilderState",
    "CHOICE_TYPES",
    "OtpSendRequest",
    "OtpVerifyRequest",
    "SessionResponse",
    "LoginRequest",
    "LoginResponse",
    "UnsubscribeResponse",
]
