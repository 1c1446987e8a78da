"""Entry point for the FastAPI-powered export API."""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Callable, TypeVar

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .config import Settings, settings
from .services.ads import compute_default_network_code
from .services.exporter import ExportService, JsonExportWriter
from .services.materializer import ExportOptions
from .services.selection import PlaceholderLogoResolver
from .store import CatalogueStore, load_catalogue

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")

app: FastAPI


def build_services(app_settings: Settings) -> tuple[CatalogueStore, ExportService]:
    """Load the seed catalogue and wire the store and export service around it."""

    catalogue = load_catalogue(app_settings.seed_data_path)
    default_network_code = app_settings.default_network_code
    if default_network_code is None:
        default_network_code = compute_default_network_code(catalogue.player_apps)

    store = CatalogueStore(catalogue)
    options = ExportOptions(
        default_network_code=default_network_code,
        ad_platforms=app_settings.ad_platforms,
        logo_resolver=PlaceholderLogoResolver(app_settings.placeholder_logo),
    )
    service = ExportService(
        store, options, JsonExportWriter(app_settings.export_output_dir)
    )
    logger.info(
        "Loaded catalogue with %d stations, %d genres and %d profiles",
        len(catalogue.stations),
        len(catalogue.genres),
        len(catalogue.export_profiles),
    )
    return store, service


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    store, service = build_services(settings)
    fastapi_app.state.store = store
    fastapi_app.state.export_service = service
    yield


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Compiles curated radio station catalogues into player export bundles",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_store(app: FastAPI) -> CatalogueStore:
    store = getattr(app.state, "store", None)
    if not isinstance(store, CatalogueStore):
        raise RuntimeError("Catalogue store not initialised")
    return store


def get_export_service(app: FastAPI) -> ExportService:
    service = getattr(app.state, "export_service", None)
    if not isinstance(service, ExportService):
        raise RuntimeError("Export service not initialised")
    return service


async def _read_payload(request: Request) -> dict[str, Any]:
    try:
        payload = await request.json()
    except json.JSONDecodeError:
        payload = {}
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid payload")
    return payload


def _guard(operation: Callable[[], ResultT]) -> ResultT:
    """Run a store or export operation, mapping its errors onto HTTP statuses."""

    try:
        return operation()
    except ValidationError as exc:
        raise HTTPException(
            status_code=400,
            detail=exc.errors(
                include_url=False, include_context=False, include_input=False
            ),
        ) from exc
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=exc.args[0]) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def register_routes(fastapi_app: FastAPI) -> None:
    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/catalogue")
    async def catalogue_endpoint() -> JSONResponse:
        return JSONResponse(get_store(fastapi_app).snapshot().to_wire())

    @fastapi_app.put("/genres/{genre_id}")
    async def save_genre_endpoint(genre_id: str, request: Request) -> JSONResponse:
        payload = await _read_payload(request)
        store = get_store(fastapi_app)
        genre = _guard(lambda: store.save_genre(genre_id, payload))
        return JSONResponse(genre.to_wire())

    @fastapi_app.delete("/genres/{genre_id}", status_code=204)
    async def delete_genre_endpoint(genre_id: str) -> Response:
        store = get_store(fastapi_app)
        _guard(lambda: store.delete_genre(genre_id))
        return Response(status_code=204)

    @fastapi_app.put("/stations/{station_id}")
    async def save_station_endpoint(station_id: str, request: Request) -> JSONResponse:
        payload = await _read_payload(request)
        store = get_store(fastapi_app)
        station = _guard(lambda: store.save_station(station_id, payload))
        return JSONResponse(station.to_wire())

    @fastapi_app.delete("/stations/{station_id}", status_code=204)
    async def delete_station_endpoint(station_id: str) -> Response:
        store = get_store(fastapi_app)
        _guard(lambda: store.delete_station(station_id))
        return Response(status_code=204)

    @fastapi_app.put("/player-apps/{player_id}")
    async def save_player_app_endpoint(player_id: str, request: Request) -> JSONResponse:
        payload = await _read_payload(request)
        store = get_store(fastapi_app)
        player = _guard(lambda: store.save_player_app(player_id, payload))
        return JSONResponse(player.to_wire())

    @fastapi_app.delete("/player-apps/{player_id}", status_code=204)
    async def delete_player_app_endpoint(player_id: str) -> Response:
        store = get_store(fastapi_app)
        _guard(lambda: store.delete_player_app(player_id))
        return Response(status_code=204)

    @fastapi_app.put("/export-profiles/{profile_id}")
    async def save_profile_endpoint(profile_id: str, request: Request) -> JSONResponse:
        payload = await _read_payload(request)
        store = get_store(fastapi_app)
        profile = _guard(lambda: store.save_profile(profile_id, payload))
        return JSONResponse(profile.to_wire())

    @fastapi_app.delete("/export-profiles/{profile_id}", status_code=204)
    async def delete_profile_endpoint(profile_id: str) -> Response:
        store = get_store(fastapi_app)
        _guard(lambda: store.delete_profile(profile_id))
        return Response(status_code=204)

    @fastapi_app.get("/export-profiles/{profile_id}/preview")
    async def preview_endpoint(profile_id: str) -> JSONResponse:
        service = get_export_service(fastapi_app)
        targets = _guard(lambda: service.preview(profile_id))
        return JSONResponse(
            {target.platform: target.payload.to_wire() for target in targets}
        )

    @fastapi_app.post("/export-profiles/{profile_id}/export")
    async def export_endpoint(profile_id: str) -> JSONResponse:
        service = get_export_service(fastapi_app)
        try:
            summary = _guard(lambda: service.export(profile_id))
        except OSError as exc:
            logger.exception("Failed to write export files for profile %s", profile_id)
            raise HTTPException(
                status_code=500, detail="Failed to write export files"
            ) from exc
        return JSONResponse(summary)


app = create_app()
