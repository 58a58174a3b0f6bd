"""Media storage for avatars, cover images, videos and thumbnails.

Files are kept on disk under ``media_root`` and served by the app under
``media_url_prefix``. Records only ever hold the public URL.

Storage structure:
    <media_root>/
    ├── avatars/
    │   └── 20260111_143022_4f1c..._me.png
    ├── videos/
    │   └── 20260115_091500_9a2e..._holiday.mp4
    └── thumbnails/
"""

import json
import logging
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from uuid import uuid4

from fastapi import UploadFile

from vidtube.config import Settings
from vidtube.errors import BadRequestError

logger = logging.getLogger(__name__)

COPY_CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class StoredMedia:
    """Where a stored file can be fetched, plus its duration for audio/video."""

    url: str
    duration: float | None = None


class MediaStorage:
    """Moves uploaded temp files into the media root."""

    def __init__(self, settings: Settings) -> None:
        """Initialize the media storage.

        Args:
            settings: Provides media_root, media_url_prefix and max_upload_size_mb
        """
        self.base_dir = Path(settings.media_root)
        self.url_prefix = settings.media_url_prefix.rstrip("/")
        self.max_upload_bytes = settings.max_upload_size_mb * 1024 * 1024

    def save_upload(self, upload: UploadFile | None) -> Path | None:
        """Write an incoming upload to a local temp file.

        Returns:
            Path of the temp file, or None when no file was sent.

        Raises:
            BadRequestError: If the upload exceeds the configured size limit.
        """
        if upload is None or not upload.filename:
            return None

        suffix = f"_{self._sanitize_filename(upload.filename)}"
        written = 0
        with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
            temp_path = Path(tmp.name)
            while chunk := upload.file.read(COPY_CHUNK_SIZE):
                written += len(chunk)
                if written > self.max_upload_bytes:
                    break
                tmp.write(chunk)

        if written > self.max_upload_bytes:
            temp_path.unlink(missing_ok=True)
            raise BadRequestError(f"File '{upload.filename}' exceeds the upload size limit")
        return temp_path

    def store(
        self,
        local_path: Path | str | None,
        folder: str | None = None,
        probe_duration: bool = False,
        filename: str | None = None,
    ) -> StoredMedia | None:
        """Move a local file into storage.

        The local file is removed whether or not the move succeeds.

        Args:
            local_path: Temp file produced by save_upload
            folder: Sub-directory under the media root
            probe_duration: Read the media duration with ffprobe
            filename: Name the file was uploaded as; defaults to the local name

        Returns:
            StoredMedia on success, None if there was nothing to store or the
            move failed.
        """
        if not local_path:
            return None

        source = Path(local_path)
        try:
            duration = self.probe_duration(source) if probe_duration else None

            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            name = self._sanitize_filename(filename or source.name)
            relative = Path(folder or "") / f"{timestamp}_{uuid4().hex}_{name}"
            target = self.base_dir / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source), target)
        except OSError:
            logger.exception("Failed to store media file %s", source)
            return None
        finally:
            source.unlink(missing_ok=True)

        url = f"{self.url_prefix}/{relative.as_posix()}"
        logger.info("Stored media: %s", url)
        return StoredMedia(url=url, duration=duration)

    def store_upload(
        self, upload: UploadFile | None, folder: str, probe_duration: bool = False
    ) -> StoredMedia | None:
        """save_upload followed by store; None when nothing was sent or storing failed."""
        return self.store(
            self.save_upload(upload),
            folder,
            probe_duration=probe_duration,
            filename=upload.filename if upload is not None else None,
        )

    @staticmethod
    def discard(local_path: Path | None) -> None:
        """Remove a temp file from save_upload that will not be stored."""
        if local_path:
            Path(local_path).unlink(missing_ok=True)

    def delete(self, url: str | None) -> bool:
        """Delete a stored file by its public URL.

        Returns:
            True if the file was deleted, False if it didn't exist or the URL
            does not point into this storage.
        """
        if not url or not url.startswith(f"{self.url_prefix}/"):
            return False

        relative = url[len(self.url_prefix) + 1 :]
        full_path = (self.base_dir / relative).resolve()
        if not full_path.is_relative_to(self.base_dir.resolve()):
            logger.warning("Refusing to delete outside media root: %s", url)
            return False

        try:
            full_path.unlink()
            logger.info("Deleted media: %s", url)
            return True
        except FileNotFoundError:
            logger.warning("Media not found for deletion: %s", url)
            return False

    @staticmethod
    def probe_duration(path: Path) -> float | None:
        """Duration in seconds according to ffprobe, None if unavailable."""
        try:
            result = subprocess.run(
                [
                    "ffprobe", "-v", "quiet", "-print_format", "json",
                    "-show_format", str(path),
                ],
                capture_output=True, text=True, timeout=30,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired):
            logger.debug("ffprobe unavailable, duration unknown for %s", path)
            return None

        if result.returncode != 0:
            return None
        try:
            return float(json.loads(result.stdout)["format"]["duration"])
        except (ValueError, KeyError, TypeError):
            return None

    @staticmethod
    def _sanitize_filename(filename: str) -> str:
        """Sanitize filename to remove potentially dangerous characters."""
        dangerous_chars = ["/", "\\", "..", "\x00", "\n", "\r", " "]
        result = filename
        for char in dangerous_chars:
            result = result.replace(char, "_")
        return result[-100:] or "file"
