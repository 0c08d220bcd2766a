"""Durable file storage for processed uploads."""
import logging
from pathlib import Path

from dokumenta.config import Settings
from dokumenta.errors import NotFoundError, StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)


class FileStorage:
    """Flat directory of stored files keyed by generated filename."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    @classmethod
    def from_settings(cls, settings: Settings) -> "FileStorage":
        return cls(settings.upload_dir)

    def path_for(self, filename: str) -> Path:
        """Deterministic location of a stored file."""
        if not filename or Path(filename).name != filename or filename in (".", ".."):
            raise NotFoundError("File not found")
        return self.root / filename

    def exists(self, filename: str) -> bool:
        return self.path_for(filename).is_file()

    def write(self, filename: str, data: bytes) -> Path:
        """Write a new file; an existing file is never overwritten."""
        path = self.path_for(filename)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with open(path, "xb") as f:
                f.write(data)
        except FileExistsError as e:
            raise StorageWriteError(f"Refusing to overwrite {filename}") from e
        except OSError as e:
            raise StorageWriteError(f"Could not write {filename}: {e}") from e
        return path

    def read(self, filename: str) -> bytes:
        path = self.path_for(filename)
        if not path.is_file():
            logger.warning(f"Stored file missing on disk: {path}")
            raise NotFoundError("File not found")
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageReadError(f"Could not read {filename}: {e}") from e

    def delete(self, filename: str) -> bool:
        """Remove a stored file; a missing file is logged, not raised."""
        path = self.path_for(filename)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            logger.warning(f"File already absent during delete: {path}")
            return False
        except OSError as e:
            logger.error(f"Could not delete {path}: {e}")
            return False
