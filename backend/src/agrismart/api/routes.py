"""
Routes API — Endpoints de l'API AgriSmart.

Le store (FarmDatabase) et le service de conseil sont construits au startup
(voir main.py), posés sur app.state et injectés via FastAPI Depends().

Codes de retour :
  - 422 : champ obligatoire manquant ou vide
  - 404 : tâche inconnue lors d'un PATCH
  - 503 : service de conseil indisponible (réessayer)
  - 500 : erreur du store (handler global)
"""

import asyncio
import base64
import binascii
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from agrismart.core.settings import settings
from agrismart.services.advisory import (
    AdvisoryService,
    AdvisoryServiceError,
    MarketTrend,
    PlantDiagnosis,
)
from agrismart.services.db_handler import FarmDatabase, UpdateOutcome
from .schemas import (
    AdviceRequest,
    AdviceResponse,
    CropCreate,
    CropOut,
    CreatedResponse,
    DiagnosisRequest,
    HealthResponse,
    SuccessResponse,
    TaskCompletionUpdate,
    TaskCreate,
    TaskOut,
)

logger = logging.getLogger("AgriSmart.API")

router = APIRouter()

ADVISORY_UNAVAILABLE = "The advisory service is unavailable right now. Please try again."


# ── Dependencies ─────────────────────────────────────────────

def get_store(request: Request) -> FarmDatabase:
    """FastAPI dependency — store ouvert par le lifespan, ou 503."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Store unavailable.")
    return store


def get_advisory(request: Request) -> AdvisoryService:
    advisory = getattr(request.app.state, "advisory", None)
    if advisory is None:
        raise HTTPException(status_code=503, detail=ADVISORY_UNAVAILABLE)
    return advisory


# ── Crops ────────────────────────────────────────────────────

@router.get("/api/crops", response_model=List[CropOut])
def list_crops(store: FarmDatabase = Depends(get_store)):
    return store.list_crops()


@router.post("/api/crops", response_model=CreatedResponse)
def create_crop(req: CropCreate, store: FarmDatabase = Depends(get_store)):
    try:
        crop_id = store.create_crop(req.name, variety=req.variety, planted_date=req.planted_date)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    logger.info("Crop created id=%s name=%s", crop_id, req.name)
    return CreatedResponse(id=crop_id)


# ── Tasks ────────────────────────────────────────────────────

@router.get("/api/tasks", response_model=List[TaskOut])
def list_tasks(store: FarmDatabase = Depends(get_store)):
    """Tâches avec le nom de leur culture, triées par échéance croissante."""
    return store.list_tasks_with_crop_name()


@router.post("/api/tasks", response_model=CreatedResponse)
def create_task(req: TaskCreate, store: FarmDatabase = Depends(get_store)):
    try:
        task_id = store.create_task(req.task_name, crop_id=req.crop_id, due_date=req.due_date)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    logger.info("Task created id=%s crop_id=%s", task_id, req.crop_id)
    return CreatedResponse(id=task_id)


@router.patch("/api/tasks/{task_id}", response_model=SuccessResponse)
def update_task(task_id: int, req: TaskCompletionUpdate, store: FarmDatabase = Depends(get_store)):
    outcome = store.set_task_completed(task_id, req.completed)
    if outcome is UpdateOutcome.NOT_FOUND:
        raise HTTPException(status_code=404, detail="Task not found")
    return SuccessResponse()


# ── Advisory ─────────────────────────────────────────────────

def _farm_context(store: FarmDatabase) -> dict:
    """Contexte par défaut envoyé au LLM : cultures + tâches ouvertes."""
    return {
        "crops": store.list_crops(),
        "open_tasks": [t for t in store.list_tasks_with_crop_name() if not t["completed"]],
    }


def _decode_image(raw: str) -> bytes:
    # Tolère un data URL complet ("data:image/jpeg;base64,....")
    if raw.startswith("data:") and "," in raw:
        raw = raw.split(",", 1)[1]
    try:
        return base64.b64decode(raw, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=422, detail="image must be valid base64")


@router.post("/api/advice", response_model=AdviceResponse)
async def get_advice(
    req: AdviceRequest,
    store: FarmDatabase = Depends(get_store),
    advisory: AdvisoryService = Depends(get_advisory),
):
    context = req.context
    if context is None:
        context = await asyncio.to_thread(_farm_context, store)
    try:
        # Run blocking LLM call in a thread pool to avoid blocking the event loop
        text = await asyncio.to_thread(advisory.get_advice, req.query, context)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except AdvisoryServiceError as e:
        logger.warning("Advice unavailable: %s", e)
        raise HTTPException(status_code=503, detail=ADVISORY_UNAVAILABLE)
    return AdviceResponse(advice=text)


@router.post("/api/diagnose", response_model=PlantDiagnosis)
async def diagnose_plant(req: DiagnosisRequest, advisory: AdvisoryService = Depends(get_advisory)):
    image_bytes = _decode_image(req.image)
    try:
        return await asyncio.to_thread(advisory.diagnose_image, image_bytes, req.mime_type)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except AdvisoryServiceError as e:
        logger.warning("Diagnosis unavailable: %s", e)
        raise HTTPException(status_code=503, detail=ADVISORY_UNAVAILABLE)


@router.get("/api/market-trends", response_model=List[MarketTrend])
async def market_trends(advisory: AdvisoryService = Depends(get_advisory)):
    try:
        return await asyncio.to_thread(advisory.get_market_trends)
    except AdvisoryServiceError as e:
        logger.warning("Market trends unavailable: %s", e)
        raise HTTPException(status_code=503, detail=ADVISORY_UNAVAILABLE)


# ── Health ───────────────────────────────────────────────────

@router.get("/health", response_model=HealthResponse)
def health_check(store: FarmDatabase = Depends(get_store)):
    """Health check avec état DB."""
    db_ok = store.check_connection()
    return HealthResponse(
        status="healthy" if db_ok else "degraded",
        database="connected" if db_ok else "disconnected",
        version=settings.APP_VERSION,
    )
