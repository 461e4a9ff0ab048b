from __future__ import annotations

from .api_models import (
    DesiredLRP,
    DesiredLRPSchedulingInfo,
    DesireLRPRequest,
    Instance,
    UpdateDesiredLRPRequest,
)
from .converter import Converter
from .desirer import Desirer
from .errors import BridgeError, ConversionError, ListError, OrchestrationError
from .events import EventLog
from .models import LAST_UPDATED, LRP, PROCESS_GUID, RUNNING_STATE


def to_scheduling_infos(lrps: list[LRP]) -> list[DesiredLRPSchedulingInfo]:
    return [
        DesiredLRPSchedulingInfo(process_guid=lrp.meta(PROCESS_GUID), annotation=lrp.meta(LAST_UPDATED))
        for lrp in lrps
    ]


class Bifrost:
    """Platform-facing facade over a Converter and a Desirer.

    Every failure is logged with the operation and process guid, then
    returned to the caller. Nothing is retried here.
    """

    def __init__(self, converter: Converter, desirer: Desirer, events: EventLog):
        self.converter = converter
        self.desirer = desirer
        self.events = events

    def transfer(self, request: DesireLRPRequest) -> None:
        try:
            lrp = self.converter.convert(request)
        except Exception as e:
            self.events.error("failed-to-convert-request", e, process_guid=request.process_guid)
            if isinstance(e, ConversionError):
                raise
            raise ConversionError(str(e)) from e

        try:
            self.desirer.desire(lrp)
        except Exception as e:
            self.events.error("failed-to-desire", e, process_guid=lrp.name)
            if not isinstance(e, BridgeError):
                raise OrchestrationError(f"{type(e).__name__}: {e}") from e
            raise

    def list(self) -> list[DesiredLRPSchedulingInfo]:
        try:
            lrps = self.desirer.list()
        except Exception as e:
            self.events.error("failed-to-list-deployments", e)
            raise ListError("failed to list desired LRPs") from e
        return to_scheduling_infos(lrps or [])

    def update(self, update: UpdateDesiredLRPRequest) -> None:
        guid = update.process_guid
        try:
            lrp = self.desirer.get(guid)
        except Exception as e:
            self.events.error("application-not-found", e, process_guid=guid)
            if not isinstance(e, BridgeError):
                raise OrchestrationError(f"{type(e).__name__}: {e}") from e
            raise

        # Both fields change before the single update call.
        lrp.target_instances = update.update.instances
        lrp.metadata[LAST_UPDATED] = update.update.annotation

        try:
            self.desirer.update(lrp)
        except Exception as e:
            self.events.error("failed-to-update", e, process_guid=guid)
            if not isinstance(e, BridgeError):
                raise OrchestrationError(f"{type(e).__name__}: {e}") from e
            raise

    def get_app(self, guid: str) -> DesiredLRP | None:
        """Best effort: any failure yields None."""
        try:
            lrp = self.desirer.get(guid)
        except Exception as e:
            self.events.error("failed-to-get-deployment", e, process_guid=guid)
            return None
        return DesiredLRP(process_guid=lrp.name, instances=lrp.target_instances)

    def stop(self, guid: str) -> None:
        try:
            self.desirer.stop(guid)
        except Exception as e:
            self.events.error("failed-to-stop", e, process_guid=guid)
            raise

    def get_instances(self, guid: str) -> list[Instance]:
        try:
            lrp = self.desirer.get(guid)
        except Exception as e:
            self.events.error("failed-to-get-lrp", e, process_guid=guid)
            if not isinstance(e, BridgeError):
                raise OrchestrationError(f"{type(e).__name__}: {e}") from e
            raise

        # Only observed running instances are reported.
        return [Instance(index=i, state=RUNNING_STATE) for i in range(lrp.running_instances)]
