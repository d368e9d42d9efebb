# studentshelf/api/routes.py
import json
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from typing import Any, Dict
from .. import schemas
from ..db import ListingRepository, get_repository
from ..services import ListingService, ListingValidationError
from ..utils import logger

router = APIRouter(prefix="/api")

FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_service(request: Request) -> ListingService:
    return request.app.state.service


async def read_payload(request: Request) -> Dict[str, Any]:
    """Return the request body as a dict, from JSON or from a form post.

    Repeated form keys (and `photos[]`) become lists.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_TYPES):
        form = await request.form()
        payload: Dict[str, Any] = {}
        for key in form.keys():
            values = form.getlist(key)
            if key.endswith("[]"):
                payload[key[:-2]] = values
            elif key == "photos" or len(values) > 1:
                payload[key] = values
            else:
                payload[key] = values[0]
        return payload
    body = await request.body()
    if not body:
        return {}
    try:
        payload = json.loads(body)
    except ValueError:
        raise ListingValidationError("Request body must be a JSON object")
    if not isinstance(payload, dict):
        raise ListingValidationError("Request body must be a JSON object")
    return payload


@router.get("/books")
def list_books(repository: ListingRepository = Depends(get_repository)):
    try:
        books = repository.read_all()
    except Exception as e:
        logger.exception("Error loading books: %s", e)
        return JSONResponse(
            status_code=500,
            content=schemas.LoadError(error="Failed to load books").model_dump(),
        )
    # returned as stored; records are not re-validated on read
    return JSONResponse(content=books)


@router.post(
    "/books",
    response_model=schemas.ListingCreated,
    responses={400: {"model": schemas.Failure}, 500: {"model": schemas.Failure}},
)
async def create_book(request: Request, service: ListingService = Depends(get_service)):
    try:
        payload = await read_payload(request)
        # file writes stay off the event loop
        listing = await run_in_threadpool(service.create_listing, payload)
    except ListingValidationError as e:
        return JSONResponse(status_code=400, content=schemas.Failure(message=str(e)).model_dump())
    except Exception as e:
        logger.exception("Error saving book: %s", e)
        return JSONResponse(
            status_code=500,
            content=schemas.Failure(message=f"Error saving book: {e}").model_dump(),
        )
    return schemas.ListingCreated(id=listing.id)
