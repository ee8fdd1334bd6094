"""
Temporary staging of uploaded documents.

Files live only for the duration of one request: ``stage`` persists them to
uniquely named temporary files and removes every one of them on exit,
whatever the outcome of the handler.
"""

import logging
import os
import tempfile
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Dict, Optional

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from conseil.services.errors import InvalidInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedDocument:
    temporary_path: str
    original_field: str
    mime_hint: str
    filename: str = ""


class UploadStore:
    def __init__(self, directory: str, max_bytes: int = 10 * 1024 * 1024):
        self.directory = directory
        self.max_bytes = max_bytes
        os.makedirs(self.directory, exist_ok=True)

    @asynccontextmanager
    async def stage(
        self, **uploads: Optional[UploadFile]
    ) -> AsyncIterator[Dict[str, UploadedDocument]]:
        """Persist each upload to a temporary file, delete them all on exit"""
        staged: Dict[str, UploadedDocument] = {}
        try:
            for field, upload in uploads.items():
                if upload is None:
                    continue
                staged[field] = await self._persist(field, upload)
            yield staged
        finally:
            for document in staged.values():
                await run_in_threadpool(self._discard, document)

    async def _persist(self, field: str, upload: UploadFile) -> UploadedDocument:
        # One byte past the limit is enough to detect an oversized part
        content = await upload.read(self.max_bytes + 1)
        if len(content) > self.max_bytes:
            raise InvalidInput("Le fichier est trop volumineux.")

        suffix = Path(upload.filename or "").suffix or ".pdf"
        path = await run_in_threadpool(self._write, field, suffix, content)
        logger.debug(f"Staged {field} ({len(content)} bytes) at {path}")

        return UploadedDocument(
            temporary_path=path,
            original_field=field,
            mime_hint=upload.content_type or "application/octet-stream",
            filename=upload.filename or "",
        )

    def _write(self, field: str, suffix: str, content: bytes) -> str:
        with tempfile.NamedTemporaryFile(
            delete=False, dir=self.directory, prefix=f"{field}-", suffix=suffix
        ) as temp_file:
            temp_file.write(content)
            return temp_file.name

    @staticmethod
    def _discard(document: UploadedDocument) -> None:
        try:
            os.unlink(document.temporary_path)
            logger.debug(f"Deleted temporary file {document.temporary_path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(
                f"Could not delete temporary file {document.temporary_path}: {e}"
            )
