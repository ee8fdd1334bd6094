from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from conseil.api.deps import get_gateway, get_upload_store
from conseil.models.schemas import AnalysisResponse
from conseil.services.completion import CompletionGateway
from conseil.services.errors import InvalidInput
from conseil.services.pdf_extractor import extract_document
from conseil.services.prompts import (
    build_cv_analysis_messages,
    build_cv_mission_messages,
)
from conseil.services.upload_store import UploadStore

router = APIRouter()

SUCCESS_MESSAGE = "Analyse réussie"


def _has_file(upload: Optional[UploadFile]) -> bool:
    return upload is not None and bool(upload.filename)


@router.post("/upload-cv", response_model=AnalysisResponse)
async def upload_cv(
    cv_file: Optional[UploadFile] = File(None, alias="cvFile"),
    job_position: Optional[str] = Form(None, alias="jobPosition"),
    store: UploadStore = Depends(get_upload_store),
    gateway: CompletionGateway = Depends(get_gateway),
):
    """Analyse a single CV against the requested position"""
    if not _has_file(cv_file):
        raise InvalidInput("Aucun fichier téléchargé.")

    async with store.stage(cvFile=cv_file) as staged:
        cv_text = await extract_document(staged["cvFile"])
        messages = build_cv_analysis_messages(cv_text, job_position)
        analysis = await gateway.complete(messages)

    return AnalysisResponse(message=SUCCESS_MESSAGE, analysis=analysis)


@router.post("/upload-cv2", response_model=AnalysisResponse)
async def upload_cv_with_mission(
    cv_file: Optional[UploadFile] = File(None, alias="cvFile"),
    mission_file: Optional[UploadFile] = File(None, alias="missionFile"),
    job_position: Optional[str] = Form(None, alias="jobPosition"),
    store: UploadStore = Depends(get_upload_store),
    gateway: CompletionGateway = Depends(get_gateway),
):
    """
    Analyse a CV, optionally against a mission description PDF.

    The mission text is appended to the requested position as extra context.
    Both documents are extracted before any completion call.
    """
    if not _has_file(cv_file):
        raise InvalidInput("Aucun fichier CV téléchargé.")
    if not _has_file(mission_file):
        mission_file = None

    async with store.stage(cvFile=cv_file, missionFile=mission_file) as staged:
        cv_text = await extract_document(staged["cvFile"])

        mission_text = None
        if "missionFile" in staged:
            mission_text = await extract_document(staged["missionFile"])

        messages = build_cv_mission_messages(cv_text, job_position, mission_text)
        analysis = await gateway.complete(messages)

    return AnalysisResponse(message=SUCCESS_MESSAGE, analysis=analysis)
