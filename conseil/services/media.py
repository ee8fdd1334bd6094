"""
Speech and image synthesis, and storage of the generated files under the
static directory.
"""

import base64
import logging
import os
import tempfile
import uuid

import openai
from openai import AsyncOpenAI
from fastapi.concurrency import run_in_threadpool

from conseil.config import settings
from conseil.services.errors import InternalError, ProviderError

logger = logging.getLogger(__name__)


class MediaSynthesizer:
    def __init__(self, api_key: str = None, timeout: float = None):
        api_key = settings.openai_api_key if api_key is None else api_key

        self.client = None
        if api_key:
            self.client = AsyncOpenAI(
                api_key=api_key,
                timeout=timeout or settings.provider_timeout,
                max_retries=0,
            )

    def _require_client(self) -> AsyncOpenAI:
        if self.client is None:
            logger.error("Media synthesis requested but no OpenAI API key is configured")
            raise ProviderError("missing OpenAI API key")
        return self.client

    async def synthesize_speech(self, text: str) -> bytes:
        """Return MP3 bytes of ``text`` read aloud"""
        client = self._require_client()
        try:
            response = await client.audio.speech.create(
                model=settings.tts_model,
                voice=settings.tts_voice,
                input=text,
            )
        except openai.OpenAIError as e:
            logger.error(f"Speech synthesis failed: {e}")
            raise ProviderError(str(e)) from e

        return response.content

    async def generate_image(self, prompt: str) -> bytes:
        """Return PNG bytes of an image generated from ``prompt``"""
        client = self._require_client()
        try:
            response = await client.images.generate(
                model=settings.image_model,
                prompt=prompt,
                size=settings.image_size,
                n=1,
                response_format="b64_json",
            )
        except openai.OpenAIError as e:
            logger.error(f"Image generation failed: {e}")
            raise ProviderError(str(e)) from e

        if not response.data or not response.data[0].b64_json:
            logger.error("Image generation returned no data")
            raise ProviderError("empty image response")

        return base64.b64decode(response.data[0].b64_json)


class MediaStore:
    """
    Writes generated files below ``static_dir/subdir`` and returns their
    public URL.

    With ``naming="per_request"`` every call gets its own file. With
    ``naming="fixed"`` each kind has a single ``output.<ext>`` file that is
    replaced on every call. Writes always go through a temporary file and an
    atomic rename, so readers never see a partial file.
    """

    def __init__(
        self,
        static_dir: str,
        subdir: str = "generated",
        naming: str = "per_request",
    ):
        if naming not in ("per_request", "fixed"):
            raise ValueError(f"Unknown media naming mode: {naming}")
        self.directory = os.path.join(static_dir, subdir)
        self.subdir = subdir
        self.naming = naming
        os.makedirs(self.directory, exist_ok=True)

    def _filename(self, kind: str, extension: str) -> str:
        if self.naming == "fixed":
            return f"output.{extension}"
        return f"{kind}-{uuid.uuid4().hex}.{extension}"

    def _write(self, filename: str, data: bytes) -> str:
        target = os.path.join(self.directory, filename)
        with tempfile.NamedTemporaryFile(
            delete=False, dir=self.directory, prefix=".partial-"
        ) as temp_file:
            temp_file.write(data)
            temp_path = temp_file.name
        try:
            os.replace(temp_path, target)
        except OSError:
            os.unlink(temp_path)
            raise
        return target

    async def save(self, kind: str, data: bytes, extension: str) -> str:
        filename = self._filename(kind, extension)
        try:
            path = await run_in_threadpool(self._write, filename, data)
        except OSError as e:
            logger.error(f"Could not write generated {kind} file: {e}")
            raise InternalError() from e

        logger.info(f"Generated {kind} written to {path}")
        return f"/{self.subdir}/{filename}"
