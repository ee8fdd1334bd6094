from typing import Optional

from pydantic import BaseModel, Field


# Response Schemas
class AnalysisResponse(BaseModel):
    """CV analysis result"""

    message: str = Field(..., description="Status message")
    analysis: str = Field(..., description="Model analysis with **Titre** headings")


class AnswerResponse(BaseModel):
    answer: str


class AudioResponse(BaseModel):
    message: str
    filePath: str = Field(..., description="Public URL of the generated MP3 file")
    answer: Optional[str] = Field(None, description="Text that was read aloud")


class ImageResponse(BaseModel):
    message: str
    imageUrl: str = Field(..., description="Public URL of the generated image")


class HealthResponse(BaseModel):
    status: str
    knowledge_loaded: bool


class ErrorResponse(BaseModel):
    error: str
