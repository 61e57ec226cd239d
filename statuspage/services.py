"""Monitored service definitions and the startup loader for them.

The service list is a JSON document of the form::

    {"servers": [{"serviceId": "...", "serviceName": "...",
                  "ipAddress": "...", "port": 80, "protocol": "http"}]}

It is read once at startup. A missing, unreadable or invalid document never
fails the process: the loader logs a warning and falls back to the built-in
seed list. Either way the application's `Readiness` is marked once loading
completes.
"""

import threading
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from statuspage.core.logging_config import get_logger

logger = get_logger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# DATA MODEL
# ═══════════════════════════════════════════════════════════════════════════

class ConfigModel(BaseModel):
    """Base model for values read from the service list.

    Configuration:
        frozen: Loaded values are never mutated after startup.
        extra: Unknown keys in the JSON document are ignored.
        populate_by_name: Accept both the camelCase JSON keys and field names.
        strict: No type coercion; a string or float port is a schema mismatch.
    """
    model_config = ConfigDict(
        frozen=True,
        extra='ignore',
        populate_by_name=True,
        strict=True,
    )


class Service(ConfigModel):
    """A downstream service that can be probed.

    Attributes:
        service_id: Unique identifier, used as the URL path segment.
        service_name: Human-readable display name.
        ip_address: Hostname or literal IP address of the target.
        port: TCP port of the target.
        protocol: URL scheme used for the probe.
    """
    service_id: str = Field(alias="serviceId", min_length=1)
    service_name: str = Field(alias="serviceName")
    ip_address: str = Field(alias="ipAddress", min_length=1)
    port: int = Field(ge=0, le=65535)
    protocol: Literal["http", "https"]


class ServiceConfig(ConfigModel):
    """The ordered list of monitored services.

    Order is preserved from the source document and is the order reported by
    `/status`. Service ids must be unique.
    """
    servers: tuple[Service, ...] = ()

    @model_validator(mode='after')
    def validate_unique_ids(self) -> 'ServiceConfig':
        seen: set[str] = set()
        for service in self.servers:
            if service.service_id in seen:
                raise ValueError(f"Duplicate serviceId: {service.service_id!r}")
            seen.add(service.service_id)
        return self

    @property
    def service_ids(self) -> list[str]:
        return [service.service_id for service in self.servers]

    def by_id(self) -> dict[str, Service]:
        """Return the id to Service mapping used for route lookup."""
        return {service.service_id: service for service in self.servers}


def default_config() -> ServiceConfig:
    """Return the built-in seed list used when no valid file is available."""
    return ServiceConfig(
        servers=(
            Service(
                service_id="dc_depops_sp",
                service_name="DevOps та Kubernetes 3.0 Status Page",
                ip_address="34.116.191.131",
                port=80,
                protocol="http",
            ),
            Service(
                service_id="google",
                service_name="Google",
                ip_address="google.com",
                port=80,
                protocol="http",
            ),
            Service(
                service_id="olekluk",
                service_name="OlekLUk",
                ip_address="34.133.93.117",
                port=80,
                protocol="http",
            ),
        )
    )


# ═══════════════════════════════════════════════════════════════════════════
# READINESS
# ═══════════════════════════════════════════════════════════════════════════

class Readiness:
    """Write-once readiness state shared between the loader and `/readyz`.

    Backed by a `threading.Event`, so it is safe to read from request
    threads while startup sets it.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def mark_ready(self) -> None:
        self._event.set()

    @property
    def is_ready(self) -> bool:
        return self._event.is_set()


# ═══════════════════════════════════════════════════════════════════════════
# LOADER
# ═══════════════════════════════════════════════════════════════════════════

class ConfigLoader:
    """Load the service list from disk, falling back to `default_config()`.

    Args:
        path: Location of the JSON service list.
        readiness: Marked ready once `load` completes, whichever path it took.
    """

    def __init__(self, path: str | Path, readiness: Readiness) -> None:
        self.path = Path(path)
        self.readiness = readiness

    def load(self) -> ServiceConfig:
        """Read and validate the service list.

        Returns:
            The parsed config, or the default config if the file cannot be
            read or does not validate. Never raises for bad input.
        """
        config = self._read()
        self.readiness.mark_ready()
        return config

    def _read(self) -> ServiceConfig:
        try:
            raw = self.path.read_bytes()
        except OSError as e:
            logger.warning(
                "Config file not readable, using defaults",
                path=str(self.path),
                error=str(e),
            )
            return default_config()

        try:
            config = ServiceConfig.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Invalid config file, using defaults",
                path=str(self.path),
                errors=e.error_count(),
                error=str(e),
            )
            return default_config()

        logger.info("Service config loaded", path=str(self.path), services=len(config.servers))
        return config
