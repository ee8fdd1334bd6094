"""
Request-scoped access to the services created at startup.

Everything is read from ``app.state`` so tests can swap any of them with
``app.dependency_overrides``.
"""

from typing import Any, Dict, Iterable

from fastapi import Request

from conseil.services.completion import CompletionGateway
from conseil.services.errors import InvalidInput
from conseil.services.knowledge import KnowledgeSnapshot
from conseil.services.media import MediaStore, MediaSynthesizer
from conseil.services.upload_store import UploadStore


def get_gateway(request: Request) -> CompletionGateway:
    return request.app.state.gateway


def get_knowledge(request: Request) -> KnowledgeSnapshot:
    return getattr(request.app.state, "knowledge", KnowledgeSnapshot())


def get_upload_store(request: Request) -> UploadStore:
    return request.app.state.upload_store


def get_synthesizer(request: Request) -> MediaSynthesizer:
    return request.app.state.synthesizer


def get_media_store(request: Request) -> MediaStore:
    return request.app.state.media_store


async def read_json_object(request: Request) -> Dict[str, Any]:
    """Parse the body as a JSON object, as a 400 rather than a 422 on failure"""
    try:
        payload = await request.json()
    except ValueError:
        raise InvalidInput("Le corps de la requête doit être un JSON valide.")

    if not isinstance(payload, dict):
        raise InvalidInput("Le corps de la requête doit être un objet JSON.")
    return payload


def require_text(payload: Dict[str, Any], keys: Iterable[str], message: str) -> str:
    """Return the first of ``keys`` holding a non-blank string"""
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value
    raise InvalidInput(message)
