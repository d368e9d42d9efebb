import base64
from unittest.mock import patch
from studentshelf.utils import listing_date

PAYLOAD = {
    "studentName": "A",
    "schoolName": "B",
    "className": "10",
    "classRoom": "C",
    "bookName": "Physics",
    "medium": "English",
    "price": "200",
    "bookDescription": "Good condition",
    "photos": [],
}

def test_pages_served(client):
    for path, name in (("/", "index.html"), ("/buy", "buy.html"), ("/sell", "sell.html")):
        response = client.get(path)
        assert response.status_code == 200
        assert name in response.text
    assert client.get("/style.css").text == "body {}"

def test_missing_page_is_404(client, settings):
    (settings.public_dir / "buy.html").unlink()
    assert client.get("/buy").status_code == 404

def test_empty_collection(client):
    response = client.get("/api/books")
    assert response.status_code == 200
    assert response.json() == []

def test_create_and_list(client):
    response = client.post("/api/books", json=PAYLOAD)
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Book posted successfully!"
    assert isinstance(data["id"], int)

    books = client.get("/api/books").json()
    assert len(books) == 1
    assert books[0]["id"] == data["id"]
    assert books[0]["photos"] == []
    assert books[0]["phoneNumber"] == ""
    assert books[0]["date"] == listing_date()

def test_sequential_creates_read_back_in_order(client):
    for i in range(3):
        client.post("/api/books", json=dict(PAYLOAD, bookName=f"Book {i}"))
    first = client.get("/api/books").json()
    assert [b["bookName"] for b in first] == ["Book 0", "Book 1", "Book 2"]
    assert client.get("/api/books").json() == first

def test_missing_price_is_400(client):
    payload = dict(PAYLOAD)
    del payload["price"]
    response = client.post("/api/books", json=payload)
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "All required fields must be filled"}
    assert client.get("/api/books").json() == []

def test_non_object_body_is_400(client):
    response = client.post("/api/books", json=["not", "an", "object"])
    assert response.status_code == 400
    assert response.json()["success"] is False

def test_photo_upload_round_trip(client):
    raw = b"\xff\xd8\xff\xe0jpeg-ish bytes"
    photos = ["data:image/jpeg;base64," + base64.b64encode(raw).decode(), "garbage"]
    response = client.post("/api/books", json=dict(PAYLOAD, photos=photos))
    assert response.status_code == 200
    book = client.get("/api/books").json()[0]
    assert len(book["photos"]) == 1
    assert book["photos"][0].startswith("/uploads/")
    image = client.get(book["photos"][0])
    assert image.status_code == 200
    assert image.content == raw

def test_corrupt_collection_is_500(client, settings):
    settings.data_file.write_text("[{", encoding="utf-8")
    response = client.get("/api/books")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to load books"}

@patch("studentshelf.db.ListingRepository.append")
def test_write_failure_is_500_with_message(mock_append, client):
    mock_append.side_effect = OSError("disk full")
    response = client.post("/api/books", json=PAYLOAD)
    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert "disk full" in data["message"]
    assert data["message"].startswith("Error saving book: ")

def test_oversized_body_is_413(client, settings):
    settings.max_body_bytes = 100
    response = client.post("/api/books", json=dict(PAYLOAD, bookDescription="x" * 500))
    assert response.status_code == 413
    assert client.get("/api/books").json() == []

def test_collection_of_non_objects_is_500_json(client, settings):
    settings.data_file.write_text("[1, 2]", encoding="utf-8")
    response = client.get("/api/books")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to load books"}

def test_malformed_json_is_400(client):
    response = client.post(
        "/api/books", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Request body must be a JSON object"}

def test_form_post_creates_listing(client):
    raw = b"form-photo"
    form = {k: v for k, v in PAYLOAD.items() if k != "photos"}
    form["phoneNumber"] = " 12345 "
    form["photos"] = ["data:image/png;base64," + base64.b64encode(raw).decode()]
    response = client.post("/api/books", data=form)
    assert response.status_code == 200
    assert response.json()["success"] is True
    book = client.get("/api/books").json()[0]
    assert book["bookName"] == "Physics"
    assert book["phoneNumber"] == "12345"
    assert len(book["photos"]) == 1
    assert client.get(book["photos"][0]).content == raw

def test_form_post_missing_field_is_400(client):
    form = {k: v for k, v in PAYLOAD.items() if k not in ("photos", "medium")}
    response = client.post("/api/books", data=form)
    assert response.status_code == 400
    assert response.json()["success"] is False
