
from pydantic import AliasChoices, BaseModel, Field
from typing import List, Optional


class RecognizeRequest(BaseModel):
    face_embedding: List[float] = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices('face_embedding', 'faceEmbedding')
    )
    # Falls back to settings.FACE_MATCH_THRESHOLD when omitted
    threshold: Optional[float] = Field(None, ge=0, allow_inf_nan=False)


class FaceMatch(BaseModel):
    id: str
    nama: str
    role: str
    nisn: Optional[str] = None
    confidence: float
    distance: float


class RecognizeResponse(BaseModel):
    success: bool
    match: Optional[FaceMatch] = None
    message: Optional[str] = None


class RegisterFaceRequest(BaseModel):
    user_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices('user_id', 'userId')
    )
    face_embedding: List[float] = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices('face_embedding', 'faceEmbedding')
    )


class RegisterFaceResponse(BaseModel):
    success: bool
    message: str
