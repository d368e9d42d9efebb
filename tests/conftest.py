import pytest
from fastapi.testclient import TestClient
from studentshelf.config import Settings
from studentshelf.main import create_app

@pytest.fixture
def settings(tmp_path):
    public = tmp_path / "public"
    public.mkdir()
    for name in ("index.html", "buy.html", "sell.html"):
        (public / name).write_text(f"<html>{name}</html>", encoding="utf-8")
    (public / "style.css").write_text("body {}", encoding="utf-8")
    return Settings(public_dir=public, data_file=tmp_path / "books.json", port=3000)

@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))
