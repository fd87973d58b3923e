

from fastapi import APIRouter, Request, HTTPException
import asyncio
import logging

from school_face.models.recognition import (
    FaceMatch,
    RecognizeRequest,
    RecognizeResponse,
    RegisterFaceRequest,
    RegisterFaceResponse,
)
from school_face.services.face_matcher import EmbeddingLengthMismatch, InvalidInput

logger = logging.getLogger(__name__)
router = APIRouter()


def get_firebase_service(request: Request):
    firebase_service = request.app.state.firebase_service
    if firebase_service is None:
        raise HTTPException(
            status_code=503,
            detail="Data store not available."
        )
    return firebase_service


@router.post(
    "/faces/recognize",
    response_model=RecognizeResponse,
    response_model_exclude_none=True
)
async def recognize_face(request: Request, body: RecognizeRequest):
    try:
        firebase_service = get_firebase_service(request)
        face_matcher = request.app.state.face_matcher
        ws_manager = request.app.state.ws_manager

        candidates = await asyncio.to_thread(firebase_service.get_enrolled_identities)
        result = face_matcher.match(body.face_embedding, candidates, body.threshold)

        if not result.is_match:
            return RecognizeResponse(success=False, message=result.message)

        match = FaceMatch(
            id=result.identity_id,
            nama=result.display_name,
            role=result.role,
            nisn=result.nisn,
            confidence=result.confidence,
            distance=result.distance
        )

        if ws_manager is not None:
            await ws_manager.broadcast("recognition", match.model_dump())

        return RecognizeResponse(success=True, match=match)

    except HTTPException:
        raise
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except EmbeddingLengthMismatch as e:
        # Enrolled data and probe come from incompatible embedding models
        logger.error(f"Face recognition aborted: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Face recognition failed: {str(e)}"
        )
    except Exception as e:
        logger.error(f"Face recognition error: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Face recognition failed: {str(e)}"
        )


@router.post("/faces/register", response_model=RegisterFaceResponse)
async def register_face(request: Request, body: RegisterFaceRequest):
    try:
        firebase_service = get_firebase_service(request)

        user = await asyncio.to_thread(firebase_service.get_user, body.user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")

        await asyncio.to_thread(
            firebase_service.register_face,
            body.user_id,
            body.face_embedding
        )

        return RegisterFaceResponse(
            success=True,
            message=f"Face registered for {user.get('nama', body.user_id)}"
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Face registration error: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Face registration failed: {str(e)}"
        )
