
from pydantic import AliasChoices, BaseModel, Field
from typing import Any, Dict, Optional


class AttendanceSettings(BaseModel):
    jam_masuk: Optional[str] = None
    jam_terlambat: str = "07:30:00"
    jam_pulang: Optional[str] = None
    toleransi_menit: int = 5


class MarkAttendanceRequest(BaseModel):
    user_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices('user_id', 'userId')
    )
    status: str = "hadir"
    meta: Dict[str, Any] = Field(default_factory=dict)


class AttendanceUser(BaseModel):
    nama: str
    role: str


class AttendanceSummary(BaseModel):
    id: str
    status: str
    waktu: str
    user: Optional[AttendanceUser] = None


class MarkAttendanceResponse(BaseModel):
    success: bool
    message: str
    attendance: Optional[AttendanceSummary] = None
