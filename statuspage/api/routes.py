"""HTTP routes: version, liveness, readiness and service status.

Collaborators are attached to `app.state` by the application factory and
lifespan, and reach the handlers through the small dependency functions
below.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from statuspage.checker import CheckResult, check_service
from statuspage.config import Settings
from statuspage.core.logging_config import get_logger
from statuspage.services import Readiness, Service, ServiceConfig

logger = get_logger(__name__)

router = APIRouter()


# ==============================================================================
# DEPENDENCIES
# ==============================================================================


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_readiness(request: Request) -> Readiness:
    return request.app.state.readiness


def get_service_config(request: Request) -> ServiceConfig:
    return request.app.state.service_config


def get_services(request: Request) -> dict[str, Service]:
    return request.app.state.services


# ==============================================================================
# METADATA & PROBES
# ==============================================================================


@router.get("/version", tags=["Meta"])
async def version(settings: Settings = Depends(get_app_settings)) -> dict[str, str]:
    """Return the build version string."""
    return {"Version": settings.VERSION}


@router.get("/healthz", status_code=status.HTTP_200_OK, tags=["Health"])
async def liveness_probe() -> dict[str, str]:
    """Return liveness status for container orchestration.

    Always 200 while the process can serve requests. Does not depend on the
    service list having been loaded.
    """
    return {"status": "ok"}


@router.get("/readyz", tags=["Health"])
async def readiness_probe(readiness: Readiness = Depends(get_readiness)):
    """Return readiness status for traffic routing decisions.

    Returns:
        200 ``{"status": "ready"}`` once the service list has been loaded,
        otherwise 503 ``{"status": "not ready"}``.
    """
    if not readiness.is_ready:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not ready"},
        )
    return {"status": "ready"}


# ==============================================================================
# SERVICE STATUS
# ==============================================================================


@router.get("/status", tags=["Status"])
async def list_services(config: ServiceConfig = Depends(get_service_config)) -> list[str]:
    """List configured service ids in configuration order."""
    return config.service_ids


@router.get("/status/{service_id}", tags=["Status"], response_model=CheckResult)
async def service_status(
    service_id: str,
    services: dict[str, Service] = Depends(get_services),
    settings: Settings = Depends(get_app_settings),
):
    """Probe one configured service and report whether it is up.

    The probe is awaited on the event loop, bounded by CHECK_TIMEOUT, so a
    slow target never stalls other requests.

    Raises:
        HTTPException: 404 when the id is not in the loaded configuration.
    """
    service = services.get(service_id)
    if service is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    try:
        result = await check_service(service, timeout=settings.CHECK_TIMEOUT)
        body = result.model_dump(mode="json")
    except Exception:
        logger.exception("Error checking service status", service_id=service_id)
        return PlainTextResponse(
            "Error checking service status",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return body
