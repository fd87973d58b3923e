
from .enrolled_identity import EnrolledIdentity
from .recognition import (
    FaceMatch,
    RecognizeRequest,
    RecognizeResponse,
    RegisterFaceRequest,
    RegisterFaceResponse,
)
from .attendance import (
    AttendanceSettings,
    AttendanceSummary,
    AttendanceUser,
    MarkAttendanceRequest,
    MarkAttendanceResponse,
)

__all__ = [
    "EnrolledIdentity",
    "FaceMatch",
    "RecognizeRequest",
    "RecognizeResponse",
    "RegisterFaceRequest",
    "RegisterFaceResponse",
    "AttendanceSettings",
    "AttendanceSummary",
    "AttendanceUser",
    "MarkAttendanceRequest",
    "MarkAttendanceResponse",
]
