# studentshelf/images.py
"""Persistence of listing photos sent as base64 data URIs.

Each photo is decoded and written on its own; a bad entry is skipped with a
reason and the rest of the batch still goes through.
"""
import base64
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence
from .utils import get_logger, now_millis

logger = get_logger("studentshelf.images")

DATA_URI_RE = re.compile(r"^data:([A-Za-z-+/]+);base64,(.+)$")
NON_BASE64_RE = re.compile(r"[^A-Za-z0-9+/]")
UPLOADS_URL = "/uploads"


@dataclass
class ImageResult:
    index: int
    path: Optional[str] = None
    reason: Optional[str] = None

    @property
    def saved(self) -> bool:
        return self.path is not None


def decode_base64(payload: str) -> bytes:
    """Decode base64 leniently: url-safe letters, stray characters and missing padding are tolerated."""
    payload = NON_BASE64_RE.sub("", payload.replace("-", "+").replace("_", "/").split("=", 1)[0])
    if len(payload) % 4 == 1:
        # a lone trailing character carries no full byte
        payload = payload[:-1]
    return base64.b64decode(payload + "=" * (-len(payload) % 4))


class ImageStore:
    def __init__(self, upload_dir: Path):
        self.upload_dir = Path(upload_dir)

    def ensure_dir(self):
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def save_all(self, photos: Sequence[Any]) -> List[ImageResult]:
        results = []
        for index, photo in enumerate(photos):
            result = self.save_one(index, photo)
            if not result.saved:
                logger.warning("Skipped photo %d: %s", index, result.reason)
            results.append(result)
        return results

    def save_photos(self, photos: Sequence[Any]) -> List[str]:
        """Save every decodable photo and return their `/uploads/...` paths in input order."""
        return [r.path for r in self.save_all(photos) if r.saved]

    def save_one(self, index: int, photo: Any) -> ImageResult:
        if not isinstance(photo, str):
            return ImageResult(index, reason="not a string")
        m = DATA_URI_RE.match(photo)
        if not m:
            return ImageResult(index, reason="not a base64 data URI")
        data = decode_base64(m.group(2))
        try:
            name = self._write(index, data)
        except OSError as e:
            logger.error("Error saving image %d: %s", index, e)
            return ImageResult(index, reason=f"write failed: {e}")
        return ImageResult(index, path=f"{UPLOADS_URL}/{name}")

    def _write(self, index: int, data: bytes) -> str:
        stamp = now_millis()
        while True:
            name = f"book_{stamp}_{index}.jpg"
            try:
                # exclusive create so a same-millisecond upload never clobbers another
                with open(self.upload_dir / name, "xb") as fh:
                    fh.write(data)
                return name
            except FileExistsError:
                stamp += 1
