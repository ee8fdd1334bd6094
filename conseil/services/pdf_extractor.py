"""
PDF text extraction for uploaded documents
"""

import io
import logging

import PyPDF2
from fastapi.concurrency import run_in_threadpool

from conseil.services.errors import EmptyOrUnreadableDocument
from conseil.services.upload_store import UploadedDocument

logger = logging.getLogger(__name__)


def extract_text(pdf_bytes: bytes) -> str:
    """Extract text content from PDF bytes, failing on an empty result"""
    if not pdf_bytes:
        raise EmptyOrUnreadableDocument()

    pages = []
    try:
        pdf_reader = PyPDF2.PdfReader(io.BytesIO(pdf_bytes))

        for page in pdf_reader.pages:
            page_text = page.extract_text()
            if page_text:
                pages.append(page_text)

    except Exception as e:
        logger.info(f"Unreadable PDF: {e}")
        raise EmptyOrUnreadableDocument() from e

    text = "\n\n".join(pages).strip()
    if not text:
        raise EmptyOrUnreadableDocument()

    return text


def _read_and_extract(path: str) -> str:
    with open(path, "rb") as file:
        return extract_text(file.read())


async def extract_document(document: UploadedDocument) -> str:
    """Extract text from a staged document without blocking the event loop"""
    return await run_in_threadpool(_read_and_extract, document.temporary_path)
