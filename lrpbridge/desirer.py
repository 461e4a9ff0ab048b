from __future__ import annotations

from typing import Protocol

from kubernetes import client
from kubernetes.client.exceptions import ApiException

from .deployments import ANNOTATION_KEYS, DeploymentManager, deployment_to_lrp, to_deployment
from .errors import ConflictError, NotFoundError
from .events import EventLog
from .kube_ops import translate_api_error
from .models import LRP
from .services import ServiceManager


class Desirer(Protocol):
    """Orchestration capability, keyed by process identity."""

    def desire(self, lrp: LRP) -> None:
        """Materialize an LRP. Re-desiring an existing LRP must be safe."""

    def update(self, lrp: LRP) -> None:
        """Apply instance count and metadata changes in place."""

    def get(self, guid: str) -> LRP:
        """Return the LRP or raise NotFoundError."""

    def list(self) -> list[LRP]:
        """Return every LRP known to the orchestrator."""

    def stop(self, guid: str) -> None:
        """Remove the LRP and its exposure objects."""


class KubeDesirer:
    """Desirer backed by one Kubernetes namespace.

    Each LRP is one Deployment plus the routable/headless Service pair kept by
    the ServiceManager.
    """

    def __init__(
        self,
        apps_api: client.AppsV1Api,
        namespace: str,
        services: ServiceManager,
        events: EventLog,
        request_timeout: float | None = None,
        deployments: DeploymentManager | None = None,
    ):
        self.apps_api = apps_api
        self.namespace = namespace
        self.services = services
        self.events = events
        self.request_timeout = request_timeout
        self.deployments = deployments or DeploymentManager(apps_api, request_timeout=request_timeout)

    def desire(self, lrp: LRP) -> None:
        try:
            self.apps_api.create_namespaced_deployment(
                self.namespace, to_deployment(lrp, self.namespace), _request_timeout=self.request_timeout
            )
            self.events.info("desire", f"Created deployment {lrp.name}", process_guid=lrp.name)
        except ApiException as e:
            if e.status != 409:
                self.events.error("desire", e, process_guid=lrp.name)
                raise translate_api_error(e, f"deployment '{lrp.name}'") from e
            self.events.info("desire", f"Deployment {lrp.name} already exists", process_guid=lrp.name)

        # Services are created one by one; a Service that already exists is kept as is.
        for create in (self.services.create, self.services.create_headless):
            try:
                create(lrp)
            except ConflictError:
                continue

    def update(self, lrp: LRP) -> None:
        body = {
            "metadata": {"annotations": {k: lrp.meta(k) for k in ANNOTATION_KEYS}},
            "spec": {"replicas": lrp.target_instances},
        }
        try:
            self.apps_api.patch_namespaced_deployment(
                lrp.name, self.namespace, body, _request_timeout=self.request_timeout
            )
        except ApiException as e:
            self.events.error("update", e, process_guid=lrp.name)
            raise translate_api_error(e, f"deployment '{lrp.name}'") from e
        # The Deployment is already patched: a missing routable Service is
        # recreated with the current routes instead of reported.
        try:
            self.services.update(lrp)
        except NotFoundError:
            try:
                self.services.create(lrp)
            except ConflictError:
                pass
        self.events.info(
            "update",
            f"Updated deployment {lrp.name}",
            process_guid=lrp.name,
            instances=lrp.target_instances,
        )

    def get(self, guid: str) -> LRP:
        try:
            deployment = self.apps_api.read_namespaced_deployment(
                guid, self.namespace, _request_timeout=self.request_timeout
            )
        except ApiException as e:
            raise translate_api_error(e, f"deployment '{guid}'") from e
        return deployment_to_lrp(deployment)

    def list(self) -> list[LRP]:
        try:
            deployments = self.deployments.list_deployments(self.namespace)
        except ApiException as e:
            raise translate_api_error(e, f"deployments in '{self.namespace}'") from e
        return [deployment_to_lrp(d) for d in deployments]

    def stop(self, guid: str) -> None:
        try:
            self.apps_api.delete_namespaced_deployment(
                guid, self.namespace, _request_timeout=self.request_timeout
            )
        except ApiException as e:
            self.events.error("stop", e, process_guid=guid)
            raise translate_api_error(e, f"deployment '{guid}'") from e
        self.events.info("stop", f"Deleted deployment {guid}", process_guid=guid)

        # Already logged by the ServiceManager; a missing Service is fine here.
        for delete in (self.services.delete, self.services.delete_headless):
            try:
                delete(guid)
            except NotFoundError:
                continue
