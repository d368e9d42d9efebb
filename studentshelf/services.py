# studentshelf/services.py
from typing import Any, Dict
from .db import ListingRepository
from .images import ImageStore
from .schemas import Listing
from .utils import logger, now_millis, listing_date

REQUIRED_FIELDS = (
    "studentName",
    "schoolName",
    "className",
    "classRoom",
    "bookName",
    "medium",
    "price",
    "bookDescription",
)
OPTIONAL_FIELDS = ("phoneNumber", "additionalMessages")


class ListingValidationError(ValueError):
    pass


def _clean(value: Any) -> str:
    if not value:
        return ""
    return str(value).strip()


class ListingService:
    def __init__(self, repository: ListingRepository, images: ImageStore):
        self.repository = repository
        self.images = images

    def create_listing(self, payload: Dict[str, Any]) -> Listing:
        """Validate `payload`, save its photos and append the new listing.

        Raises ListingValidationError before any side effect when a required
        field is missing or blank. Image and repository errors propagate.
        """
        fields = {name: _clean(payload.get(name)) for name in REQUIRED_FIELDS}
        if not all(fields.values()):
            raise ListingValidationError("All required fields must be filled")
        photos = payload.get("photos")
        if photos is None:
            photos = []
        if not isinstance(photos, list):
            raise ListingValidationError("photos must be a list of data URIs")
        fields.update({name: _clean(payload.get(name)) for name in OPTIONAL_FIELDS})

        listing = Listing(
            id=now_millis(),
            photos=self.images.save_photos(photos) if photos else [],
            date=listing_date(),
            **fields,
        )
        stored = self.repository.append(listing.model_dump())
        logger.info("Created listing %s with %d photo(s)", stored["id"], len(listing.photos))
        return Listing(**stored)
