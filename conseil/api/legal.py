from fastapi import APIRouter, Depends, Request

from conseil.api.deps import get_gateway, get_knowledge, read_json_object, require_text
from conseil.models.schemas import AnswerResponse
from conseil.services.completion import CompletionGateway
from conseil.services.knowledge import KnowledgeSnapshot
from conseil.services.prompts import build_legal_messages, build_prompt_helper_messages

router = APIRouter()

INVALID_QUESTION = "La question doit être une chaîne de caractères valide."


@router.post("/legal-query", response_model=AnswerResponse)
async def legal_query(
    request: Request,
    knowledge: KnowledgeSnapshot = Depends(get_knowledge),
    gateway: CompletionGateway = Depends(get_gateway),
):
    """Point the user to the relevant books, chapters and sections of the penal code"""
    payload = await read_json_object(request)
    question = require_text(payload, ("question",), INVALID_QUESTION)

    messages = build_legal_messages(question, knowledge.require())
    answer = await gateway.complete(messages)

    return AnswerResponse(answer=answer.strip())


@router.post("/test-query", response_model=AnswerResponse)
async def test_query(
    request: Request,
    gateway: CompletionGateway = Depends(get_gateway),
):
    """Turn a free-text request into a refined prompt"""
    payload = await read_json_object(request)
    question = require_text(payload, ("question",), INVALID_QUESTION)

    answer = await gateway.complete(build_prompt_helper_messages(question))

    return AnswerResponse(answer=answer.strip())
