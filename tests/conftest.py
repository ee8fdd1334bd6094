import io
import os
import tempfile
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import PyPDF2
import pytest
from fastapi.testclient import TestClient

# Set test environment before the settings are read
_TEST_ROOT = tempfile.mkdtemp(prefix="conseil-tests-")
os.environ["STATIC_DIR"] = os.path.join(_TEST_ROOT, "public")
os.environ["UPLOAD_DIR"] = os.path.join(_TEST_ROOT, "uploads")
os.environ["KNOWLEDGE_PATH"] = os.path.join(_TEST_ROOT, "missing-legalDb.txt")
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""

from conseil.main import app
from conseil.api.deps import (
    get_gateway,
    get_knowledge,
    get_media_store,
    get_synthesizer,
    get_upload_store,
)
from conseil.services.completion import CompletionGateway
from conseil.services.knowledge import KnowledgeSnapshot
from conseil.services.media import MediaStore, MediaSynthesizer
from conseil.services.upload_store import UploadStore

SAMPLE_ANALYSIS = """**Compétences Analysées**
- Python, FastAPI

**Résumé du profil**
Développeur backend.

**Adéquation au poste demandé**
Bonne adéquation.

**Compétences manquantes**
- Kubernetes"""

SAMPLE_KNOWLEDGE = """Livre II : Des crimes et délits contre les personnes
Chapitre 1 : Des atteintes à la vie de la personne
Section 1 : Des atteintes volontaires à la vie"""


def make_text_pdf(text: str) -> bytes:
    """Build a one-page PDF showing ``text`` in Helvetica"""
    content = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 5 0 R >> >> /Contents 4 0 R >>",
        b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    pdf = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(pdf))
        pdf += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(pdf)
    pdf += b"xref\n0 %d\n" % (len(objects) + 1)
    pdf += b"0000000000 65535 f \n"
    for offset in offsets:
        pdf += b"%010d 00000 n \n" % offset
    pdf += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
    pdf += b"startxref\n%d\n%%%%EOF\n" % xref_offset
    return pdf


def make_blank_pdf() -> bytes:
    """Build a one-page PDF with no text layer"""
    writer = PyPDF2.PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture
def cv_pdf() -> bytes:
    return make_text_pdf("Jean Dupont Developpeur Python FastAPI")


@pytest.fixture
def blank_pdf() -> bytes:
    return make_blank_pdf()


@pytest.fixture
def pdf_factory():
    return make_text_pdf


@pytest.fixture
def mock_gateway():
    """Mock completion gateway returning a fixed analysis"""
    mock = MagicMock(spec=CompletionGateway)
    mock.complete = AsyncMock(return_value=SAMPLE_ANALYSIS)
    return mock


@pytest.fixture
def mock_synthesizer():
    mock = MagicMock(spec=MediaSynthesizer)
    mock.synthesize_speech = AsyncMock(return_value=b"ID3-fake-mp3")
    mock.generate_image = AsyncMock(return_value=b"\x89PNG-fake")
    return mock


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def upload_store(upload_dir):
    return UploadStore(str(upload_dir), max_bytes=1024 * 1024)


@pytest.fixture
def media_store(tmp_path):
    return MediaStore(str(tmp_path / "public"), "generated", "per_request")


@pytest.fixture
def knowledge():
    return KnowledgeSnapshot(text=SAMPLE_KNOWLEDGE, source="test")


@pytest.fixture
def client(
    mock_gateway, mock_synthesizer, upload_store, media_store, knowledge
) -> Generator:
    """Create test client with every external collaborator replaced"""
    with TestClient(app) as test_client:
        app.dependency_overrides[get_gateway] = lambda: mock_gateway
        app.dependency_overrides[get_synthesizer] = lambda: mock_synthesizer
        app.dependency_overrides[get_upload_store] = lambda: upload_store
        app.dependency_overrides[get_media_store] = lambda: media_store
        app.dependency_overrides[get_knowledge] = lambda: knowledge
        yield test_client
    app.dependency_overrides.clear()
