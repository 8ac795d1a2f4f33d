"""
JSON File Store

Keeps one pydantic snapshot per file. Writes go to a temp file in the same
directory and are moved into place, so a crash never leaves a half-written
snapshot behind.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Generic, Optional, Type, TypeVar

from pydantic import BaseModel

from batchcogs.errors import PersistenceError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class JsonFileStore(Generic[M]):
    """Snapshot store backed by a single JSON file."""

    def __init__(self, path: str, model: Type[M]):
        self.path = Path(path)
        self.model = model

    def load(self) -> Optional[M]:
        if not self.path.exists():
            return None
        try:
            content = self.path.read_text(encoding="utf-8")
            return self.model.model_validate_json(content)
        except (OSError, ValueError) as e:
            raise PersistenceError(
                f"Could not read {self.path}: {e}",
                details={"path": str(self.path)},
            ) from e

    def save(self, snapshot: M) -> None:
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(snapshot.model_dump_json(indent=2))
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise PersistenceError(
                f"Could not write {self.path}: {e}",
                details={"path": str(self.path)},
            ) from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        logger.debug(f"Wrote snapshot to {self.path}")
