
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings"""

    # Firebase
    FIREBASE_CREDENTIALS: str = "serviceAccountKey.json"
    # Falls back to the project_id in the service-account file when unset
    FIREBASE_PROJECT_ID: Optional[str] = None

    # Face matching
    FACE_MATCH_THRESHOLD: float = 0.6

    # Attendance
    DEFAULT_LATE_TIME: str = "07:30:00"
    DEFAULT_TOLERANCE_MINUTES: int = 5

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    LOG_DIR: str = "logs"

    class Config:
        env_file = ".env"
        extra = "ignore"
        case_sensitive = True


# Global settings instance
settings = Settings()
