# studentshelf/db.py
"""Listing repository backed by a single JSON collection file.

The whole collection is read into memory and rewritten on every append. The
read-modify-write runs under a lock so concurrent requests in this process
cannot drop each other's listings.
"""
import json
import os
import stat
import threading
from pathlib import Path
from typing import Any, Dict, List
from fastapi import Request


class ListingRepository:
    def __init__(self, data_file: Path):
        self.data_file = Path(data_file)
        self._lock = threading.Lock()

    def read_all(self) -> List[Dict[str, Any]]:
        if not self.data_file.exists():
            return []
        with open(self.data_file, "r", encoding="utf-8") as fh:
            books = json.load(fh)
        if not isinstance(books, list):
            raise ValueError(f"{self.data_file} does not hold a JSON array")
        if not all(isinstance(book, dict) for book in books):
            raise ValueError(f"{self.data_file} holds entries that are not listing objects")
        return books

    def append(self, listing: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            books = self.read_all()
            if books and isinstance(books[-1].get("id"), int) and listing["id"] <= books[-1]["id"]:
                # keep ids unique and in file order
                listing = {**listing, "id": books[-1]["id"] + 1}
            books.append(listing)
            self._write(books)
        return listing

    def _write(self, books: List[Dict[str, Any]]):
        self.data_file.parent.mkdir(parents=True, exist_ok=True)
        # opened normally so a new file gets the umask-based mode; an existing file keeps its own
        tmp = self.data_file.with_name(f".{self.data_file.name}.{os.getpid()}.tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as fh:
                json.dump(books, fh, indent=2, ensure_ascii=False)
            if self.data_file.exists():
                os.chmod(tmp, stat.S_IMODE(self.data_file.stat().st_mode))
            os.replace(tmp, self.data_file)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise


def get_repository(request: Request) -> ListingRepository:
    return request.app.state.repository
