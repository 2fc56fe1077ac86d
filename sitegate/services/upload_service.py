"""Media uploads stored on disk under the configured upload directory."""

from __future__ import annotations

import os
import secrets
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from sitegate.utils.logs import logger
from sitegate.utils.timeutils import isoformat

UPLOAD_URL_PREFIX = "/uploads"


class UploadError(Exception):
    """Upload rejected; ``status`` is the HTTP status to answer with."""

    def __init__(self, message: str, status: int = 400):
        super().__init__(message)
        self.message = message
        self.status = status


class UploadStore:
    def __init__(self, directory: Path, allowed_types: Mapping[str, str], max_file_size: int):
        self.directory = Path(directory)
        self.allowed_types = {ext.lower(): mime.lower() for ext, mime in allowed_types.items()}
        self.allowed_mimes = set(self.allowed_types.values())
        self.max_file_size = max_file_size

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Validação
    # ------------------------------------------------------------------
    @staticmethod
    def extension_of(filename: str) -> str:
        return os.path.splitext(filename or "")[1].lstrip(".").lower()

    def is_allowed(self, filename: str, mimetype: Optional[str]) -> bool:
        extension = self.extension_of(filename)
        mime = (mimetype or "").split(";")[0].strip().lower()
        return extension in self.allowed_types and mime in self.allowed_mimes

    @staticmethod
    def size_of(file: FileStorage) -> int:
        stream = file.stream
        position = stream.tell()
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(position)
        return size

    def _random_name(self, field: str, extension: str) -> str:
        stamp = int(time.time() * 1000)
        return f"{field}-{stamp}-{secrets.token_hex(6)}.{extension}"

    # ------------------------------------------------------------------
    # Operações
    # ------------------------------------------------------------------
    def save(self, file: FileStorage, *, field: str = "file") -> Dict[str, Any]:
        if file is None or not file.filename:
            raise UploadError("No file uploaded")

        if not self.is_allowed(file.filename, file.mimetype):
            logger.info("Upload recusado: %s (%s)", file.filename, file.mimetype)
            raise UploadError("Only images, audio, and video files are allowed!")

        size = self.size_of(file)
        if size > self.max_file_size:
            raise UploadError("File too large", status=413)

        self.ensure_directory()
        filename = self._random_name(field, self.extension_of(file.filename))
        file.save(self.directory / filename)
        logger.info("Ficheiro %s guardado como %s (%d bytes)", file.filename, filename, size)
        return {
            "filename": filename,
            "originalname": file.filename,
            "size": size,
            "url": f"{UPLOAD_URL_PREFIX}/{filename}",
        }

    def save_many(self, files: List[FileStorage], *, field: str = "files", max_files: int = 5) -> List[Dict[str, Any]]:
        files = [file for file in files if file and file.filename]
        if not files:
            raise UploadError("No files uploaded")
        if len(files) > max_files:
            raise UploadError(f"Too many files (max {max_files})")
        # valida tudo antes de escrever no disco
        for file in files:
            if not self.is_allowed(file.filename, file.mimetype):
                raise UploadError("Only images, audio, and video files are allowed!")
            if self.size_of(file) > self.max_file_size:
                raise UploadError("File too large", status=413)
        return [self.save(file, field=field) for file in files]

    def resolve(self, filename: str) -> Optional[Path]:
        """Path inside the upload directory, or ``None`` for unsafe names."""
        safe = secure_filename(filename or "")
        if not safe or safe != filename:
            return None
        path = (self.directory / safe).resolve()
        if path.parent != self.directory.resolve():
            return None
        return path

    def list_files(self) -> List[Dict[str, Any]]:
        if not self.directory.is_dir():
            return []
        files = []
        for path in sorted(self.directory.iterdir()):
            if not path.is_file() or path.name.startswith("."):
                continue
            stat = path.stat()
            files.append(
                {
                    "filename": path.name,
                    "size": stat.st_size,
                    "created": isoformat(
                        datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).replace(tzinfo=None)
                    ),
                    "url": f"{UPLOAD_URL_PREFIX}/{path.name}",
                }
            )
        return files

    def delete(self, filename: str) -> bool:
        path = self.resolve(filename)
        if path is None or not path.is_file():
            return False
        path.unlink()
        logger.info("Ficheiro %s removido", filename)
        return True


__all__ = ["UPLOAD_URL_PREFIX", "UploadError", "UploadStore"]
