
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import os

from school_face.routes import attendance, faces
from school_face.services.face_matcher import FaceMatcher
from school_face.services.firebase_service import FirebaseService
from school_face.websocket.manager import ConnectionManager
from school_face.utils.config import settings
from school_face.utils.logger import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

ws_manager = ConnectionManager()


@asynccontextmanager
async def lifespan(app: FastAPI):

    logger.info("Starting School Face Attendance Backend...")

    app.state.face_matcher = FaceMatcher(settings.FACE_MATCH_THRESHOLD)
    app.state.ws_manager = ws_manager

    try:
        logger.info("Initializing Firebase...")
        if not os.path.exists(settings.FIREBASE_CREDENTIALS):
            logger.warning(f"Firebase credentials not found at {settings.FIREBASE_CREDENTIALS}")
            logger.warning("Face and attendance endpoints will be unavailable")
            firebase_service = None
        else:
            firebase_service = FirebaseService(
                settings.FIREBASE_CREDENTIALS,
                settings.FIREBASE_PROJECT_ID
            )
            logger.info("Firebase initialized successfully!")

        app.state.firebase_service = firebase_service

    except Exception as e:
        logger.error(f"Startup error: {str(e)}", exc_info=True)
        logger.warning("Server starting with limited functionality")
        app.state.firebase_service = None

    yield

    logger.info("Shutting down services...")


app = FastAPI(
    title="School Face Attendance API",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(faces.router, prefix="/api", tags=["Faces"])
app.include_router(attendance.router, prefix="/api", tags=["Attendance"])


@app.get("/")
async def root():
    return {
        "status": "online",
        "service": "School Face Attendance Backend",
        "version": "1.0.0",
        "services": {
            "firebase": getattr(app.state, "firebase_service", None) is not None
        }
    }


@app.websocket("/ws/attendance")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket endpoint streaming recognition and attendance events"""
    await app.state.ws_manager.connect(websocket)
    try:
        while True:
            data = await websocket.receive_text()
            logger.info(f"Received from dashboard: {data}")
    except WebSocketDisconnect:
        app.state.ws_manager.disconnect(websocket)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "school_face.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
