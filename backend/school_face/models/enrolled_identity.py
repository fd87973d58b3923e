
from pydantic import BaseModel
from typing import List, Optional


class EnrolledIdentity(BaseModel):
    identity_id: str
    display_name: str
    role: str
    nisn: Optional[str] = None  # nomor induk siswa, students only
    embedding: Optional[List[float]] = None

    @classmethod
    def from_user_document(cls, user_id: str, data: dict) -> "EnrolledIdentity":
        return cls(
            identity_id=user_id,
            display_name=data.get('nama', ''),
            role=data.get('role', ''),
            nisn=data.get('nisn'),
            embedding=data.get('face_embedding')
        )
