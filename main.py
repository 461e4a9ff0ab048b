"""API entry point.

Run with: uvicorn main:build_app --factory
"""
from __future__ import annotations

from fastapi import FastAPI

from lrpbridge.api import create_app
from lrpbridge.bifrost import Bifrost
from lrpbridge.converter import DesireLRPConverter
from lrpbridge.deployments import DeploymentManager
from lrpbridge.desirer import KubeDesirer
from lrpbridge.events import EventLog
from lrpbridge.kube_ops import KubeApis, load_apis
from lrpbridge.services import ServiceManager
from lrpbridge.settings import Settings, settings


def build_bifrost(
    apis: KubeApis,
    events: EventLog,
    deployments: DeploymentManager,
    s: Settings = settings,
) -> Bifrost:
    services = ServiceManager(apis.core, s.namespace, events, request_timeout=s.request_timeout_s)
    desirer = KubeDesirer(
        apis.apps,
        s.namespace,
        services,
        events,
        request_timeout=s.request_timeout_s,
        deployments=deployments,
    )
    return Bifrost(converter=DesireLRPConverter(), desirer=desirer, events=events)


def build_app(s: Settings = settings) -> FastAPI:
    events = EventLog(s.events_db_path)
    events.info("startup", f"Bridging LRPs into namespace '{s.namespace}'")
    apis = load_apis(s)
    deployments = DeploymentManager(apis.apps, request_timeout=s.request_timeout_s)
    return create_app(
        build_bifrost(apis, events, deployments, s),
        events,
        lister=deployments,
        namespace=s.namespace,
        events_limit=s.events_limit,
    )
