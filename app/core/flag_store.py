"""Directory-backed storage for small named records"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


class FlagStore:
    """Named records inside a single runtime data directory.

    Records are plain files. Mutations report success as a boolean and log
    the underlying OS error instead of raising. Writes go through a temporary
    file and ``os.replace`` so concurrent readers see either the old or the
    new content.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, name: str) -> Path:
        if not name or os.sep in name or name in (".", ".."):
            raise ValueError(f"Invalid record name: {name!r}")
        return self.directory / name

    def exists(self, name: str) -> bool:
        return self._path(name).exists()

    def touch(self, name: str) -> bool:
        path = self._path(name)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.touch(exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to touch {path}: {e}")
            return False
        return True

    def delete(self, name: str) -> bool:
        path = self._path(name)
        try:
            path.unlink()
        except FileNotFoundError:
            return True
        except OSError as e:
            logger.error(f"Failed to delete {path}: {e}")
            return False
        return True

    def read_file(self, name: str) -> str:
        """Read a record; raises FileNotFoundError when it does not exist"""
        return self._path(name).read_text(encoding="utf-8")

    def write_file(self, name: str, content: str) -> bool:
        path = self._path(name)
        tmp_name = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, path)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            return False
        return True
