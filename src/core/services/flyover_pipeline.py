"""ISS flyover orchestration.

Chains the three lookups strictly in sequence:

    IP resolver -> geolocation resolver -> pass predictor

The first failure aborts the chain and the very same exception object
reaches the caller. Nothing is retried, cached or wrapped. A pipeline
instance only holds its collaborators, so concurrent runs never share
mutable state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

import httpx

from adapters.geolocation import FreeGeoIPResolver
from adapters.ip_lookup import IpifyResolver
from adapters.pass_predictor import IssPassPredictor
from core.config import AppSettings
from core.domain.models import Coordinates, FlyoverReport, IPAddress, PassList
from core.interfaces.lookups import GeolocationResolver, IPResolver, PassPredictor
from core.logging_setup import get_logger

logger = get_logger(__name__)


class PipelineStage(str, Enum):
    """Stages of a single run. `DONE` and `FAILED` are terminal."""

    AWAITING_IP = "awaiting_ip"
    AWAITING_COORDINATES = "awaiting_coordinates"
    AWAITING_PASSES = "awaiting_passes"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineStage.DONE, PipelineStage.FAILED)


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress)."""

    stage_changed: Callable[[PipelineStage], None] | None = None


@dataclass(frozen=True)
class FlyoverPipeline:
    """The three collaborators of a run."""

    ip_resolver: IPResolver
    geolocation_resolver: GeolocationResolver
    pass_predictor: PassPredictor
    hooks: PipelineHooks = field(default_factory=PipelineHooks)

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        hooks: PipelineHooks | None = None,
    ) -> "FlyoverPipeline":
        """Build the default HTTP-backed pipeline."""

        settings = settings or AppSettings()
        return cls(
            ip_resolver=IpifyResolver(settings, client=client),
            geolocation_resolver=FreeGeoIPResolver(settings, client=client),
            pass_predictor=IssPassPredictor(settings, client=client),
            hooks=hooks or PipelineHooks(),
        )

    async def run(self) -> PassList:
        """Return the upcoming passes for the caller's location."""

        _, _, passes = await self._chain()
        return passes

    async def run_report(self) -> FlyoverReport:
        """Same chain as `run`, keeping the intermediate IP and coordinates."""

        ip, coords, passes = await self._chain()
        return FlyoverReport(ip=ip, coordinates=coords, passes=passes)

    async def _chain(self) -> tuple[IPAddress, Coordinates, PassList]:
        stage = PipelineStage.AWAITING_IP
        self._enter(stage)
        try:
            ip = await self.ip_resolver.resolve_my_ip()

            stage = PipelineStage.AWAITING_COORDINATES
            self._enter(stage)
            coords = await self.geolocation_resolver.resolve_coordinates(ip)

            stage = PipelineStage.AWAITING_PASSES
            self._enter(stage)
            passes = await self.pass_predictor.predict_passes(coords)
        except Exception as exc:
            logger.info("flyover_failed", stage=stage.value, error=str(exc))
            self._enter(PipelineStage.FAILED)
            raise

        self._enter(PipelineStage.DONE)
        logger.info("flyover_done", passes=len(passes))
        return ip, coords, passes

    def _enter(self, stage: PipelineStage) -> None:
        logger.debug("flyover_stage", stage=stage.value)
        if self.hooks.stage_changed is not None:
            self.hooks.stage_changed(stage)


async def next_passes_for_my_location(
    settings: AppSettings | None = None,
    *,
    hooks: PipelineHooks | None = None,
) -> PassList:
    """Upcoming ISS passes over the caller's current location.

    Raises:
        TransportError: a lookup could not reach its service.
        UpstreamError: a service answered with a non-200 status or an
            unexpected body.
    """

    return await FlyoverPipeline.from_settings(settings, hooks=hooks).run()
