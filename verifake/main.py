"""FastAPI entry point. Builds the store, heuristic and service, and exposes
the analysis, dashboard and admin endpoints under /api. Every response body
carries a ``success`` flag; errors are rendered as {"error": ..., "success": false}."""

import logging
import random
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from verifake import config
from verifake.detector import DetectionHeuristic
from verifake.errors import InternalError, ServiceError, ValidationError
from verifake.service import DetectionService
from verifake.storage import EntityStore

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_service(request: Request) -> DetectionService:
    return request.app.state.service


def build_service() -> DetectionService:
    """Wire a fresh store and heuristic from settings."""
    rng = random.Random(config.DETECTION_SEED) if config.DETECTION_SEED is not None else random.Random()
    store = EntityStore(seed=config.SEED_ON_STARTUP)
    return DetectionService(store, DetectionHeuristic(rng), rng)


# ==================== Analysis ====================

@router.post("/analyze")
async def analyze_account(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    service: DetectionService = Depends(get_service),
) -> dict:
    payload = payload or {}
    try:
        result = service.analyze(payload.get("url"), payload.get("platform"))
    except ServiceError:
        raise
    except Exception as exc:
        logger.error(f"Analysis error: {exc}", exc_info=True)
        raise InternalError("Analysis failed", status_code=400) from exc
    return {**result, "success": True}


@router.get("/accounts/{account_id}/detections")
async def account_detections(
    account_id: str,
    service: DetectionService = Depends(get_service),
) -> dict:
    try:
        result = service.get_detections_by_account(account_id)
    except ServiceError:
        raise
    except Exception as exc:
        logger.error(f"Detection history error: {exc}", exc_info=True)
        raise InternalError("Failed to fetch detections") from exc
    return {**result, "success": True}


# ==================== Dashboard ====================

@router.get("/analytics/dashboard")
async def dashboard_analytics(service: DetectionService = Depends(get_service)) -> dict:
    try:
        result = service.get_dashboard_analytics()
    except Exception as exc:
        logger.error(f"Dashboard analytics error: {exc}", exc_info=True)
        raise InternalError("Failed to fetch analytics") from exc
    return {**result, "success": True}


@router.get("/activity/recent")
async def recent_activity(service: DetectionService = Depends(get_service)) -> dict:
    try:
        activities = service.get_recent_activity()
    except Exception as exc:
        logger.error(f"Recent activity error: {exc}", exc_info=True)
        raise InternalError("Failed to fetch recent activity") from exc
    return {"activities": activities, "success": True}


# ==================== Admin ====================

@router.get("/admin/system-status")
async def system_status(service: DetectionService = Depends(get_service)) -> dict:
    try:
        metrics = service.get_system_status()
    except Exception as exc:
        logger.error(f"System status error: {exc}", exc_info=True)
        raise InternalError("Failed to fetch system status") from exc
    return {"metrics": metrics, "success": True}


@router.get("/admin/system-status/history")
async def system_status_history(
    hours: float = Query(default=config.METRICS_HISTORY_HOURS, gt=0),
    service: DetectionService = Depends(get_service),
) -> dict:
    try:
        metrics = service.get_system_metrics_history(hours)
    except Exception as exc:
        logger.error(f"System metrics history error: {exc}", exc_info=True)
        raise InternalError("Failed to fetch system metrics history") from exc
    return {"metrics": metrics, "success": True}


@router.get("/admin/users")
async def list_users(service: DetectionService = Depends(get_service)) -> dict:
    try:
        users = service.list_users()
    except Exception as exc:
        logger.error(f"Users fetch error: {exc}", exc_info=True)
        raise InternalError("Failed to fetch users") from exc
    return {"users": users, "success": True}


@router.post("/admin/users")
async def create_user(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    service: DetectionService = Depends(get_service),
) -> dict:
    try:
        user = service.create_user(payload)
    except ServiceError:
        raise
    except Exception as exc:
        logger.error(f"User creation error: {exc}", exc_info=True)
        raise InternalError("Failed to create user", status_code=400) from exc
    return {"user": user, "success": True}


@router.patch("/admin/users/{user_id}")
async def update_user(
    user_id: str,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    service: DetectionService = Depends(get_service),
) -> dict:
    try:
        user = service.update_user(user_id, payload)
    except ServiceError:
        raise
    except Exception as exc:
        logger.error(f"User update error: {exc}", exc_info=True)
        raise InternalError("Failed to update user", status_code=400) from exc
    return {"user": user, "success": True}


@router.get("/admin/analytics/trends")
async def analytics_trends(service: DetectionService = Depends(get_service)) -> dict:
    try:
        trends = service.get_analytics_trends()
    except Exception as exc:
        logger.error(f"Analytics trends error: {exc}", exc_info=True)
        raise InternalError("Failed to fetch analytics trends") from exc
    return {"trends": trends, "success": True}


# ==================== App ====================

async def _service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    error: Any = exc.errors if isinstance(exc, ValidationError) else exc.message
    return JSONResponse(status_code=exc.status_code, content={"error": error, "success": False})


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [{"path": list(err.get("loc", [])), "message": err.get("msg", "")} for err in exc.errors()]
    logger.warning(f"400 INVALID REQUEST | {request.url.path} | {[e['path'] for e in errors]}")
    return JSONResponse(status_code=400, content={"error": errors, "success": False})


def create_app(service: Optional[DetectionService] = None) -> FastAPI:
    """Build the API around ``service`` (a freshly seeded one by default)."""
    service = service or build_service()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"{config.APP_NAME} v{config.APP_VERSION} started | "
            f"users={len(service.store.users)} | Docs: /docs | Health: GET /"
        )
        yield

    app = FastAPI(
        title=config.APP_NAME,
        description="Fake social account detection demo: analysis, dashboard and admin endpoints",
        version=config.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ServiceError, _service_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    @app.get("/")
    async def health_check() -> dict:
        return {
            "status": "online",
            "service": config.APP_NAME,
            "version": config.APP_VERSION,
        }

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
