"""Local directory storage for uploaded resumes."""

import time
from pathlib import Path
from typing import Optional
from uuid import uuid4

from hireflow.storage.base import ResumeStore
from hireflow.utils.logging import get_logger

logger = get_logger(__name__)


class LocalResumeStore(ResumeStore):
    """Stores each resume as one file named ``<millis>-<random><ext>``."""

    def __init__(self, directory: str):
        self.directory = Path(directory)
        self.logger = logger.bind(component="resume_store", directory=str(self.directory))

    def path_for(self, handle: str) -> Path:
        if not handle or Path(handle).name != handle or handle in (".", ".."):
            raise ValueError(f"Invalid resume handle: {handle!r}")
        return self.directory / handle

    def save(self, document: bytes, filename: Optional[str] = None) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        suffix = Path(filename).suffix.lower() if filename else ""
        handle = f"{int(time.time() * 1000)}-{uuid4().hex[:8]}{suffix}"
        self.path_for(handle).write_bytes(document)
        self.logger.info("Resume stored", handle=handle, size_bytes=len(document))
        return handle

    def release(self, handle: str) -> bool:
        path = self.path_for(handle)
        if not path.exists():
            self.logger.debug("Resume already absent", handle=handle)
            return False
        path.unlink(missing_ok=True)
        self.logger.info("Resume released", handle=handle)
        return True

    def exists(self, handle: str) -> bool:
        return self.path_for(handle).exists()
