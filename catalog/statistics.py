"""
LocateW Statistics Sidecar
==========================
Small JSON record written by updatedb next to the database and read back
by `locate -S`.

  {"dirs": 1234, "files": 56789, "files_bytes": 4321000,
   "db_size": 987654, "elapsed": 93}

Missing keys read back as 0 so older or hand-edited files still load.
"""

import json
import os
import tempfile
from dataclasses import asdict, dataclass, fields


class DatabaseMissingError(FileNotFoundError):
    """Raised when the database or its statistics file does not exist."""
    pass


@dataclass
class Statistics:
    """Counters collected while building the database."""
    dirs: int = 0
    files: int = 0
    files_bytes: int = 0     # UTF-8 bytes in file paths (directories excluded)
    db_size: int = 0         # compressed database size in bytes
    elapsed: int = 0         # seconds spent building

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Statistics":
        values = {}
        for f in fields(cls):
            raw = data.get(f.name, 0)
            values[f.name] = raw if isinstance(raw, int) and not isinstance(raw, bool) else 0
        return cls(**values)

    def save(self, path: str) -> None:
        """
        Persist to path using an atomic write (temp file + os.replace),
        so a reader never sees a half-written file.
        """
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)
        tmp_fd, tmp_path = tempfile.mkstemp(dir=directory, prefix="stats_", suffix=".tmp")
        try:
            with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f)
            os.replace(tmp_path, path)
        except Exception:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    @classmethod
    def load(cls, path: str) -> "Statistics":
        if not os.path.isfile(path):
            raise DatabaseMissingError(f"Statistics file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Statistics file {path} does not hold a JSON object")
        return cls.from_dict(data)
