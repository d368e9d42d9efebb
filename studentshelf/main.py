# studentshelf/main.py
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from .api.routes import router as api_router
from .config import Settings, get_settings
from .db import ListingRepository
from .images import ImageStore, UPLOADS_URL
from .services import ListingService
from .utils import logger

PAGES = {"/": "index.html", "/buy": "buy.html", "/sell": "sell.html"}


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="StudentShelf")

    images = ImageStore(settings.upload_dir)
    images.ensure_dir()
    repository = ListingRepository(settings.data_file)
    app.state.settings = settings
    app.state.repository = repository
    app.state.service = ListingService(repository, images)

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        length = request.headers.get("content-length")
        if length and length.isdigit() and int(length) > settings.max_body_bytes:
            return JSONResponse(
                status_code=413,
                content={"success": False, "message": "Request body too large"},
            )
        return await call_next(request)

    @app.on_event("startup")
    def announce():
        base = f"http://localhost:{settings.port}"
        logger.info("StudentShelf server running on %s", base)
        for path in PAGES:
            logger.info("  page %s%s", base, path if path != "/" else "")

    for path, filename in PAGES.items():
        app.add_api_route(path, _page(settings, filename), methods=["GET"], include_in_schema=False)

    app.include_router(api_router)
    app.mount(UPLOADS_URL, StaticFiles(directory=settings.upload_dir), name="uploads")
    # everything else in the public directory (css, js, images) is served as-is
    app.mount("/", StaticFiles(directory=settings.public_dir, check_dir=False), name="public")
    return app


def _page(settings: Settings, filename: str):
    def serve_page():
        page = settings.public_dir / filename
        if not page.is_file():
            raise HTTPException(status_code=404, detail="Page not found")
        return FileResponse(page)
    serve_page.__name__ = f"page_{filename.split('.')[0]}"
    return serve_page


def run():
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
