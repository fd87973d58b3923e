
from datetime import datetime
from typing import Optional

from school_face.models.attendance import AttendanceSettings

STATUS_PRESENT = "hadir"
STATUS_LATE = "terlambat"
STATUS_ABSENT = "tidak_hadir"


def determine_status(
    requested_status: str,
    now: datetime,
    attendance_settings: Optional[AttendanceSettings] = None
) -> str:
    # Only an on-time request can be downgraded to late; explicit statuses are kept
    if requested_status != STATUS_PRESENT:
        return requested_status

    attendance_settings = attendance_settings or AttendanceSettings()
    current_time = now.strftime("%H:%M:%S")

    # HH:MM:SS strings compare correctly as text
    if current_time > attendance_settings.jam_terlambat:
        return STATUS_LATE
    return STATUS_PRESENT
