# studentshelf/config.py
"""Process configuration.

Storage locations and the listen port live on one `Settings` object that is
handed to the repository, image store and app factory, instead of being
module globals. Values come from the environment (a `.env` file is honoured)
unless passed explicitly. Relative paths resolve against the working
directory the server is started from.
"""
import os
from functools import lru_cache
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

DEFAULT_MAX_BODY_BYTES = 50 * 1024 * 1024


class Settings:
    def __init__(
        self,
        port: int | None = None,
        host: str | None = None,
        public_dir: str | Path | None = None,
        upload_dir: str | Path | None = None,
        data_file: str | Path | None = None,
        max_body_bytes: int | None = None,
    ):
        self.port = port if port is not None else int(os.getenv("PORT", 3000))
        self.host = host or os.getenv("HOST", "0.0.0.0")
        self.public_dir = Path(public_dir or os.getenv("PUBLIC_DIR") or "public")
        self.upload_dir = Path(upload_dir or os.getenv("UPLOAD_DIR") or self.public_dir / "uploads")
        self.data_file = Path(data_file or os.getenv("DATA_FILE") or "books.json")
        self.max_body_bytes = (
            max_body_bytes
            if max_body_bytes is not None
            else int(os.getenv("MAX_BODY_BYTES", DEFAULT_MAX_BODY_BYTES))
        )

    def __repr__(self):
        return (
            f"Settings(port={self.port}, public_dir='{self.public_dir}', "
            f"upload_dir='{self.upload_dir}', data_file='{self.data_file}')"
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
