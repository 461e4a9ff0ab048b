from __future__ import annotations

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse
from kubernetes.client.exceptions import ApiException

from .api_models import (
    DesiredLRPResponse,
    DesiredLRPSchedulingInfosResponse,
    DesiredLRPUpdate,
    DesireLRPRequest,
    InstancesResponse,
    LRPNamesResponse,
    UpdateDesiredLRPRequest,
)
from .bifrost import Bifrost
from .deployments import DeploymentManager
from .errors import BridgeError, ConflictError, ConversionError, NotFoundError
from .events import EventLog
from .kube_ops import translate_api_error


def _status_for(e: BridgeError) -> int:
    if isinstance(e, ConversionError):
        return 400
    if isinstance(e, NotFoundError):
        return 404
    if isinstance(e, ConflictError):
        return 409
    return 502


def create_app(
    bifrost: Bifrost,
    events: EventLog,
    lister: DeploymentManager,
    namespace: str,
    events_limit: int = 100,
) -> FastAPI:
    app = FastAPI(title="LRP Bridge")

    # Every error body is {"error": <kind>, "detail": <message>}.
    @app.exception_handler(BridgeError)
    def _bridge_error(request: Request, e: BridgeError) -> JSONResponse:
        return JSONResponse(
            status_code=_status_for(e),
            content={"error": type(e).__name__, "detail": str(e)},
        )

    @app.put("/apps/{process_guid}", status_code=202)
    def desire_app(process_guid: str, req: DesireLRPRequest) -> dict:
        if req.process_guid != process_guid:
            raise ConversionError("process_guid in path and body differ")
        bifrost.transfer(req)
        return {"process_guid": process_guid}

    @app.get("/apps", response_model=DesiredLRPSchedulingInfosResponse)
    def list_apps() -> DesiredLRPSchedulingInfosResponse:
        return DesiredLRPSchedulingInfosResponse(desired_lrp_scheduling_infos=bifrost.list())

    @app.post("/apps/{process_guid}")
    def update_app(process_guid: str, update: DesiredLRPUpdate) -> dict:
        bifrost.update(UpdateDesiredLRPRequest(process_guid=process_guid, update=update))
        return {"process_guid": process_guid}

    @app.get("/apps/{process_guid}", response_model=DesiredLRPResponse)
    def get_app(process_guid: str) -> DesiredLRPResponse:
        lrp = bifrost.get_app(process_guid)
        if lrp is None:
            raise NotFoundError(f"app '{process_guid}' not found")
        return DesiredLRPResponse(desired_lrp=lrp)

    @app.put("/apps/{process_guid}/stop")
    def stop_app(process_guid: str) -> dict:
        bifrost.stop(process_guid)
        return {"process_guid": process_guid}

    @app.get("/apps/{process_guid}/instances", response_model=InstancesResponse)
    def get_instances(process_guid: str) -> InstancesResponse:
        return InstancesResponse(process_guid=process_guid, instances=bifrost.get_instances(process_guid))

    @app.get("/lrps", response_model=LRPNamesResponse)
    def list_lrps() -> LRPNamesResponse:
        """Identity-only view straight from the namespace's Deployments."""
        try:
            lrps = lister.list_lrps(namespace)
        except ApiException as e:
            events.error("failed-to-list-lrps", e, namespace=namespace)
            raise translate_api_error(e, f"deployments in '{namespace}'") from e
        return LRPNamesResponse(namespace=namespace, process_guids=[lrp.name for lrp in lrps])

    @app.get("/events")
    def get_events(
        limit: int = Query(events_limit, ge=1, le=1000),
        process_guid: str | None = None,
    ) -> list[dict]:
        return events.latest(limit=limit, process_guid=process_guid)

    return app
