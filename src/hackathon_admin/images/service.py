from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..candidates.model import Candidate
from ..candidates.repository import CandidateRepository
from ..common.validators import require_int
from ..core.constants import ALLOWED_IMAGE_EXTENSIONS
from ..core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class ImageService:
    """Candidate photos stored as files under the upload directory."""

    def __init__(self, candidates: CandidateRepository, *, upload_dir: str | Path):
        self._candidates = candidates
        self._upload_dir = Path(upload_dir)

    def save_photo(self, candidate_id: Any, upload: FileStorage | None) -> str:
        if candidate_id in (None, "") or upload is None or not upload.filename:
            raise ValidationError("Candidate ID and image required")
        cid = require_int(candidate_id, "candidateId")

        original = secure_filename(upload.filename)
        if Path(original).suffix.lower() not in ALLOWED_IMAGE_EXTENSIONS:
            raise ValidationError("Unsupported image type")
        if not self._candidates.get_by_id(cid):
            raise NotFoundError("Candidate not found")

        filename = f"{int(time.time() * 1000)}-{original}"
        self._upload_dir.mkdir(parents=True, exist_ok=True)
        upload.save(self._upload_dir / filename)
        self._candidates.update_fields(cid, {"photo_url": filename})
        logger.info("Stored photo %s for candidate %s", filename, cid)
        return filename

    def photo_file(self, candidate: Candidate) -> Optional[Path]:
        """Stored photo of ``candidate`` on disk, or None."""
        if not candidate.photo_url:
            return None
        # Stored names are bare file names; refuse anything that escapes the directory.
        path = (self._upload_dir / Path(candidate.photo_url).name).resolve()
        return path if path.is_file() else None

    def photo_path(self, candidate_id: int) -> Path:
        candidate = self._candidates.get_by_id(int(candidate_id))
        if not candidate or not candidate.photo_url:
            raise NotFoundError("Image not found")
        path = self.photo_file(candidate)
        if path is None:
            raise NotFoundError("File not found")
        return path
