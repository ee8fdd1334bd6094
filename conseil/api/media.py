from fastapi import APIRouter, Depends, Request

from conseil.api.deps import (
    get_gateway,
    get_media_store,
    get_synthesizer,
    read_json_object,
    require_text,
)
from conseil.models.schemas import AudioResponse, ImageResponse
from conseil.services.completion import CompletionGateway
from conseil.services.media import MediaStore, MediaSynthesizer
from conseil.services.prompts import build_audio_script_messages, clean_question

router = APIRouter()


@router.post("/generate-audio", response_model=AudioResponse)
async def generate_audio(
    request: Request,
    gateway: CompletionGateway = Depends(get_gateway),
    synthesizer: MediaSynthesizer = Depends(get_synthesizer),
    store: MediaStore = Depends(get_media_store),
):
    """Answer the question, read the answer aloud and publish the MP3"""
    payload = await read_json_object(request)
    question = require_text(
        payload, ("question", "prompt"), "La question doit être une chaîne de caractères valide."
    )

    answer = (await gateway.complete(build_audio_script_messages(question))).strip()
    audio = await synthesizer.synthesize_speech(answer)
    url = await store.save("audio", audio, "mp3")

    return AudioResponse(message="Audio généré avec succès", filePath=url, answer=answer)


@router.post("/generate-image", response_model=ImageResponse)
async def generate_image(
    request: Request,
    synthesizer: MediaSynthesizer = Depends(get_synthesizer),
    store: MediaStore = Depends(get_media_store),
):
    payload = await read_json_object(request)
    prompt = require_text(
        payload, ("prompt", "question"), "Le prompt doit être une chaîne de caractères valide."
    )

    image = await synthesizer.generate_image(clean_question(prompt))
    url = await store.save("image", image, "png")

    return ImageResponse(message="Image générée avec succès", imageUrl=url)
