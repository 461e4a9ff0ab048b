from __future__ import annotations

from kubernetes import client
from kubernetes.client.exceptions import ApiException

from .events import EventLog
from .kube_ops import translate_api_error
from .models import APPLICATION_URIS, LRP
from .naming import headless_service_name, routable_service_name


SERVICE_PORT = 8080
SERVICE_PORT_NAME = "service"
NAME_LABEL = "name"
ROUTES_ANNOTATION = "routes"


def to_service(lrp: LRP, namespace: str) -> client.V1Service:
    """Routable Service for an LRP: stable cluster address plus route annotation."""
    return client.V1Service(
        metadata=client.V1ObjectMeta(
            name=routable_service_name(lrp.name),
            namespace=namespace,
            labels={NAME_LABEL: lrp.name},
            annotations={ROUTES_ANNOTATION: lrp.meta(APPLICATION_URIS)},
        ),
        spec=client.V1ServiceSpec(
            ports=[client.V1ServicePort(name=SERVICE_PORT_NAME, port=SERVICE_PORT)],
            selector={NAME_LABEL: lrp.name},
        ),
    )


def to_headless_service(lrp: LRP, namespace: str) -> client.V1Service:
    """Headless Service for per-instance discovery; never carries routes."""
    return client.V1Service(
        metadata=client.V1ObjectMeta(
            name=headless_service_name(lrp.name),
            namespace=namespace,
            labels={NAME_LABEL: lrp.name},
        ),
        spec=client.V1ServiceSpec(
            cluster_ip="None",
            ports=[client.V1ServicePort(name=SERVICE_PORT_NAME, port=SERVICE_PORT)],
            selector={NAME_LABEL: lrp.name},
        ),
    )


class ServiceManager:
    """Owns the routable + headless Service pair of every LRP in one namespace.

    Creates are a single create call, so the API server's own check-and-create
    decides conflicts. Nothing here ever overwrites an existing Service.
    """

    def __init__(
        self,
        core_api: client.CoreV1Api,
        namespace: str,
        events: EventLog,
        request_timeout: float | None = None,
    ):
        self.core_api = core_api
        self.namespace = namespace
        self.events = events
        self.request_timeout = request_timeout

    def create(self, lrp: LRP) -> None:
        self._create(to_service(lrp, self.namespace), lrp.name, "create-service")

    def create_headless(self, lrp: LRP) -> None:
        self._create(to_headless_service(lrp, self.namespace), lrp.name, "create-headless-service")

    def update(self, lrp: LRP) -> None:
        """Refresh the routes annotation of an existing routable Service in place."""
        name = routable_service_name(lrp.name)
        body = {"metadata": {"annotations": {ROUTES_ANNOTATION: lrp.meta(APPLICATION_URIS)}}}
        try:
            self.core_api.patch_namespaced_service(
                name, self.namespace, body, _request_timeout=self.request_timeout
            )
        except ApiException as e:
            self.events.error("update-service", e, process_guid=lrp.name, service=name)
            raise translate_api_error(e, f"service '{name}'") from e

    def delete(self, name: str) -> None:
        self._delete(routable_service_name(name), name, "delete-service")

    def delete_headless(self, name: str) -> None:
        self._delete(headless_service_name(name), name, "delete-headless-service")

    def _create(self, service: client.V1Service, lrp_name: str, operation: str) -> None:
        service_name = service.metadata.name
        try:
            self.core_api.create_namespaced_service(
                self.namespace, service, _request_timeout=self.request_timeout
            )
        except ApiException as e:
            self.events.error(operation, e, process_guid=lrp_name, service=service_name)
            raise translate_api_error(e, f"service '{service_name}'") from e
        self.events.info(operation, f"Created service {service_name}", process_guid=lrp_name)

    def _delete(self, service_name: str, lrp_name: str, operation: str) -> None:
        try:
            self.core_api.delete_namespaced_service(
                service_name, self.namespace, _request_timeout=self.request_timeout
            )
        except ApiException as e:
            self.events.error(operation, e, process_guid=lrp_name, service=service_name)
            raise translate_api_error(e, f"service '{service_name}'") from e
        self.events.info(operation, f"Deleted service {service_name}", process_guid=lrp_name)
