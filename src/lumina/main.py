from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from google import genai
from pydantic import BaseModel

from .adapters.analysis import GeminiImageAnalyzer, ImageAnalyzer
from .adapters.generation import GeminiImageGenerator, ImageGenerationError, ImageGenerator
from .domain.models import Photo
from .gallery import (
    AnalysisFailedError,
    CollectionStateManager,
    EmptyPromptError,
    NoImageGeneratedError,
    UploadRejectedError,
    generate_photo,
    upload_photo,
)
from .settings import AppSettings, load_settings
from .storage import SlotPhotoStore, initialize_slots

LOGGER = logging.getLogger(__name__)


class GenerateRequest(BaseModel):
    prompt: str


def _get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def _get_manager(request: Request) -> CollectionStateManager:
    return request.app.state.manager


def _get_analyzer(request: Request) -> ImageAnalyzer:
    analyzer = request.app.state.analyzer
    if analyzer is None:
        raise HTTPException(status_code=503, detail="Image analysis is not configured, set GEMINI_API_KEY")
    return analyzer


def _get_generator(request: Request) -> ImageGenerator:
    generator = request.app.state.generator
    if generator is None:
        raise HTTPException(status_code=503, detail="Image generation is not configured, set GEMINI_API_KEY")
    return generator


def _photo_records(photos: list[Photo]) -> list[dict[str, Any]]:
    return [photo.to_record() for photo in photos]


def _build_photo_store(settings: AppSettings) -> SlotPhotoStore:
    return SlotPhotoStore(
        db_path=settings.db_path,
        slot=settings.yaml.gallery.storage_slot,
        max_bytes=settings.yaml.storage.max_bytes,
    )


def _build_genai_client(settings: AppSettings) -> genai.Client | None:
    if settings.env.gemini_api_key is None:
        LOGGER.warning("GEMINI_API_KEY is not set; upload and generate are disabled")
        return None
    return genai.Client(api_key=settings.env.gemini_api_key)


def _build_analyzer(settings: AppSettings, client: genai.Client | None) -> GeminiImageAnalyzer | None:
    if client is None:
        return None
    return GeminiImageAnalyzer(
        client=client,
        model=settings.yaml.analysis.model,
        instruction=settings.yaml.analysis.instruction,
    )


def _build_generator(settings: AppSettings, client: genai.Client | None) -> GeminiImageGenerator | None:
    if client is None:
        return None
    return GeminiImageGenerator(
        client=client,
        model=settings.yaml.generation.model,
        default_mime_type=settings.yaml.generation.default_mime_type,
    )


@asynccontextmanager
async def lifespan(application: FastAPI):
    settings = load_settings()
    initialize_slots(settings.db_path)
    manager = CollectionStateManager(
        store=_build_photo_store(settings),
        persist_limit=settings.yaml.gallery.persist_limit,
    )
    manager.initialize()
    client = _build_genai_client(settings)

    application.state.settings = settings
    application.state.manager = manager
    application.state.analyzer = _build_analyzer(settings, client)
    application.state.generator = _build_generator(settings, client)
    application.state.started_at_utc = datetime.now(timezone.utc)
    yield


app = FastAPI(title="Lumina Gallery", version="0.1.0", lifespan=lifespan)


@app.get("/health", response_class=JSONResponse)
async def health(request: Request) -> JSONResponse:
    settings = _get_settings(request)
    manager = _get_manager(request)
    return JSONResponse(
        {
            "status": "ok",
            "service": "lumina",
            "environment": settings.env.lumina_env,
            "ai_configured": settings.ai_configured,
            "photo_count": len(manager.photos),
            "started_at_utc": request.app.state.started_at_utc.isoformat(),
            "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        }
    )


@app.get("/api/photos", response_class=JSONResponse)
async def list_photos(request: Request, q: str = "") -> JSONResponse:
    manager = _get_manager(request)
    photos = manager.set_search_query(q)
    return JSONResponse({"query": q, "count": len(photos), "photos": _photo_records(photos)})


@app.get("/api/photos/{photo_id}", response_class=JSONResponse)
async def get_photo(request: Request, photo_id: str) -> JSONResponse:
    photo = _get_manager(request).get(photo_id)
    if photo is None:
        raise HTTPException(status_code=404, detail="Photo not found")
    return JSONResponse(photo.to_record())


@app.post("/api/photos/upload", response_class=JSONResponse, status_code=201)
async def upload(request: Request) -> JSONResponse:
    manager = _get_manager(request)
    analyzer = _get_analyzer(request)
    image_bytes = await request.body()
    mime_type = request.headers.get("content-type", "")
    try:
        photo = await upload_photo(manager, analyzer, image_bytes, mime_type)
    except UploadRejectedError as exc:
        raise HTTPException(status_code=415, detail=str(exc)) from exc
    except AnalysisFailedError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return JSONResponse(photo.to_record(), status_code=201)


@app.post("/api/photos/generate", response_class=JSONResponse, status_code=201)
async def generate(request: Request, body: GenerateRequest) -> JSONResponse:
    settings = _get_settings(request)
    manager = _get_manager(request)
    generator = _get_generator(request)
    try:
        photo = await generate_photo(
            manager,
            generator,
            body.prompt,
            subject_keywords=settings.yaml.generation.subject_keywords,
            prompt_template=settings.yaml.generation.prompt_template,
        )
    except (EmptyPromptError, NoImageGeneratedError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ImageGenerationError as exc:
        raise HTTPException(
            status_code=502,
            detail="Failed to generate image. Check your prompt or API key.",
        ) from exc
    return JSONResponse(photo.to_record(), status_code=201)
