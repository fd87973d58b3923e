

from fastapi import APIRouter, Request, HTTPException
from datetime import datetime
from typing import Any, Dict, Optional
import asyncio
import logging

from school_face.models.attendance import (
    AttendanceSettings,
    AttendanceSummary,
    AttendanceUser,
    MarkAttendanceRequest,
    MarkAttendanceResponse,
)
from school_face.routes.faces import get_firebase_service
from school_face.services.attendance_rules import determine_status
from school_face.utils.config import settings

logger = logging.getLogger(__name__)
router = APIRouter()


def _now() -> datetime:
    return datetime.now()


def resolve_attendance_settings(stored: Optional[Dict[str, Any]]) -> AttendanceSettings:
    # Fields missing from the stored document take the configured defaults
    defaults = AttendanceSettings(
        jam_terlambat=settings.DEFAULT_LATE_TIME,
        toleransi_menit=settings.DEFAULT_TOLERANCE_MINUTES
    )
    if not stored:
        return defaults
    return AttendanceSettings(**{**defaults.model_dump(), **stored})


@router.post(
    "/attendance/mark",
    response_model=MarkAttendanceResponse,
    response_model_exclude_none=True
)
async def mark_attendance(request: Request, body: MarkAttendanceRequest):
    try:
        firebase_service = get_firebase_service(request)
        ws_manager = request.app.state.ws_manager

        user = await asyncio.to_thread(firebase_service.get_user, body.user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")

        now = _now()
        today = now.strftime("%Y-%m-%d")
        timestamp = now.isoformat()

        existing = await asyncio.to_thread(
            firebase_service.get_attendance_for_day, body.user_id, today
        )
        if existing:
            return MarkAttendanceResponse(
                success=False,
                message="Attendance already recorded today",
                attendance=AttendanceSummary(
                    id=existing['id'],
                    status=existing.get('status', ''),
                    waktu=str(existing.get('waktu', ''))
                )
            )

        stored_settings = await asyncio.to_thread(
            firebase_service.get_active_attendance_settings
        )
        attendance_settings = resolve_attendance_settings(stored_settings)

        status = determine_status(body.status, now, attendance_settings)

        attendance_data = {
            "user_id": body.user_id,
            "tanggal": today,
            "waktu": timestamp,
            "status": status,
            "meta": {
                **body.meta,
                "method": "face_recognition",
                "timestamp": timestamp
            }
        }
        attendance_id = await asyncio.to_thread(firebase_service.save_attendance, attendance_data)

        summary = AttendanceSummary(
            id=attendance_id,
            status=status,
            waktu=timestamp,
            user=AttendanceUser(nama=user.get('nama', ''), role=user.get('role', ''))
        )

        if ws_manager is not None:
            await ws_manager.broadcast("attendance", {
                "user_id": body.user_id,
                **summary.model_dump()
            })

        return MarkAttendanceResponse(
            success=True,
            message=f"Attendance recorded as {status}",
            attendance=summary
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Attendance marking error: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Attendance marking failed: {str(e)}"
        )
