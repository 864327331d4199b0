"""Entry point for the FastAPI-powered movie catalog service."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .config import settings
from .database import Database
from .errors import DuplicateMovieError, MovieValidationError, PersistenceError
from .models import MovieDraft, SearchParams
from .services.detail_resolver import DetailStatus
from .services.library import MovieLibrary
from .services.storage import SqlKeyValueStore
from .services.tmdb import TMDBClient

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    tmdb_http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            base_url=str(settings.tmdb_api_url),
            timeout=httpx.Timeout(20.0, connect=10.0),
        )
    )
    database = Database(settings.database_url)
    await database.create_all()

    library = MovieLibrary(
        settings,
        TMDBClient(settings, tmdb_http_client),
        SqlKeyValueStore(database.session_factory),
    )
    fastapi_app.state.library = library
    fastapi_app.state.database = database
    await library.start()

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await database.dispose()
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Popular movies merged with your own collection",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_library(app: FastAPI) -> MovieLibrary:
    library = getattr(app.state, "library", None)
    if not isinstance(library, MovieLibrary):
        raise RuntimeError("Movie library not initialised")
    return library


def _dump(record: Any) -> dict[str, Any]:
    return record.model_dump(mode="json", by_alias=True)


def register_routes(fastapi_app: FastAPI) -> None:
    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/api/status")
    async def status_endpoint() -> dict[str, Any]:
        return get_library(fastapi_app).status()

    @fastapi_app.post("/api/catalog/refresh")
    async def refresh_endpoint() -> dict[str, Any]:
        library = get_library(fastapi_app)
        await library.catalog.refresh()
        return library.status()

    @fastapi_app.get("/api/genres")
    async def genres_endpoint() -> dict[str, Any]:
        library = get_library(fastapi_app)
        return {"genres": [genre.model_dump() for genre in library.catalog.genres()]}

    @fastapi_app.get("/api/movies")
    async def list_movies(page: int = Query(default=1, ge=1)) -> dict[str, Any]:
        return get_library(fastapi_app).page(page).to_payload()

    @fastapi_app.post("/api/movies", status_code=201)
    async def add_movie(request: Request) -> dict[str, Any]:
        library = get_library(fastapi_app)
        try:
            payload = await request.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Invalid payload")
        try:
            draft = MovieDraft.model_validate(payload)
        except ValidationError as exc:
            raise HTTPException(
                status_code=400, detail=exc.errors(include_context=False)
            ) from exc

        try:
            record = await library.guard.admit(draft)
        except MovieValidationError as exc:
            raise HTTPException(
                status_code=400, detail={"field": exc.field, "message": exc.message}
            ) from exc
        except DuplicateMovieError as exc:
            raise HTTPException(
                status_code=409,
                detail={"message": str(exc), **exc.check.to_payload()},
            ) from exc
        except PersistenceError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return _dump(record)

    @fastapi_app.get("/api/movies/duplicates")
    async def duplicate_check(
        title: str = "", image: str | None = None
    ) -> dict[str, bool]:
        guard = get_library(fastapi_app).guard
        if image:
            return guard.check_duplicate(title, image).to_payload()
        return guard.live_title_check(title).to_payload()

    @fastapi_app.get("/api/movies/{movie_id}")
    async def movie_detail(movie_id: int) -> JSONResponse:
        library = get_library(fastapi_app)
        result = await library.details.get_by_id(movie_id)
        payload = result.to_payload()
        if result.movie is not None:
            payload["genreLabels"] = library.catalog.genre_labels(result.movie)
            payload["posterUrl"] = result.movie.poster_url(library.settings.image_base_url)
            payload["runtimeText"] = result.movie.format_runtime()
        if result.status is DetailStatus.NOT_FOUND:
            return JSONResponse(payload, status_code=404)
        if result.status is DetailStatus.ERROR:
            return JSONResponse(payload, status_code=502)
        return JSONResponse(payload)

    @fastapi_app.get("/api/search")
    async def search_endpoint(request: Request) -> dict[str, Any]:
        library = get_library(fastapi_app)
        try:
            params = SearchParams.model_validate(dict(request.query_params))
        except ValidationError as exc:
            raise HTTPException(
                status_code=400, detail=exc.errors(include_context=False)
            ) from exc
        results = await library.query.search(params)
        return {
            "results": [_dump(record) for record in results],
            "hasSearched": library.query.has_searched,
            "error": library.query.error,
        }

    @fastapi_app.delete("/api/search")
    async def clear_search() -> dict[str, Any]:
        library = get_library(fastapi_app)
        library.query.reset()
        return {"results": [], "hasSearched": False}

    @fastapi_app.get("/api/suggestions")
    async def suggestions_endpoint(query: str = "") -> dict[str, Any]:
        library = get_library(fastapi_app)
        return {
            "suggestions": [
                {"id": record.id, "title": record.title}
                for record in library.query.suggest(query)
            ]
        }


app = create_app()
