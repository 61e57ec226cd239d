"""Single-shot reachability probe for a configured service.

A probe is one HTTP GET against ``{protocol}://{ip_address}:{port}`` with a
bounded timeout. The timeout is a single deadline for the whole exchange:
connecting, every redirect hop and the response headers of the final hop.
The verdict is binary: "up" when the request completes in time and the final
response is exactly 200, "down" for anything else. Probe failures are never
raised to the caller.
"""

import asyncio
from typing import Literal

import httpx
from pydantic import BaseModel, ConfigDict

from statuspage.core.logging_config import get_logger
from statuspage.services import Service

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 3.0  # seconds, total for connect + response


class CheckResult(BaseModel):
    """Outcome of one probe, serialized as ``{"service_name", "status"}``."""
    model_config = ConfigDict(frozen=True)

    service_name: str
    status: Literal["up", "down"]


def service_url(service: Service) -> str:
    return f"{service.protocol}://{service.ip_address}:{service.port}"


async def _fetch_status_code(client: httpx.AsyncClient, url: str) -> int:
    # Body is never read; leaving the stream closes the response.
    async with client.stream("GET", url) as response:
        return response.status_code


async def check_service(
    service: Service,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CheckResult:
    """Probe a service once and map the outcome to up/down.

    Redirects are followed, so a redirect chain ending in 200 counts as up,
    provided the whole chain completes within `timeout`.

    Args:
        service: Service to probe.
        timeout: Total time allowed for the probe, in seconds.
        transport: Optional transport override, used by tests.

    Returns:
        CheckResult: The service's display name and its status.
    """
    url = service_url(service)
    status = "down"

    try:
        async with httpx.AsyncClient(
            timeout=timeout, transport=transport, follow_redirects=True
        ) as client:
            status_code = await asyncio.wait_for(_fetch_status_code(client, url), timeout=timeout)
    except (httpx.HTTPError, httpx.InvalidURL, asyncio.TimeoutError) as e:
        logger.info(
            "Probe failed",
            service_id=service.service_id,
            url=url,
            error=e.__class__.__name__,
        )
    else:
        if status_code == httpx.codes.OK:
            status = "up"
        else:
            logger.debug(
                "Probe returned non-200",
                service_id=service.service_id,
                status_code=status_code,
            )

    logger.debug("Probe finished", service_id=service.service_id, status=status)
    return CheckResult(service_name=service.service_name, status=status)
