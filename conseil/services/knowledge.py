"""
Legal knowledge snapshot, read once at startup and never mutated.

The snapshot lives on ``app.state.knowledge`` and reaches handlers through a
dependency. An empty snapshot means the knowledge is unavailable.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from fastapi import FastAPI

from conseil.config import settings
from conseil.services.errors import KnowledgeUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KnowledgeSnapshot:
    text: str = ""
    source: str = ""

    @property
    def available(self) -> bool:
        return bool(self.text)

    def require(self) -> str:
        """Return the knowledge text or raise if it was never loaded"""
        if not self.available:
            raise KnowledgeUnavailable()
        return self.text

    @classmethod
    def load(cls, path: str) -> "KnowledgeSnapshot":
        """Read the whole file. Failures are logged and yield an empty snapshot."""
        resolved = Path(path).resolve()
        try:
            text = resolved.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Could not load knowledge file {resolved}: {e}")
            return cls(text="", source=str(resolved))

        logger.info(f"Loaded knowledge file {resolved} ({len(text)} characters)")
        return cls(text=text, source=str(resolved))


def reload_knowledge(app: FastAPI, path: str = None) -> KnowledgeSnapshot:
    """Load the knowledge file and swap it in on the application state"""
    snapshot = KnowledgeSnapshot.load(path or settings.knowledge_path)
    app.state.knowledge = snapshot
    return snapshot
