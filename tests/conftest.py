import sys

import pytest
from kubernetes import client
from kubernetes.client.exceptions import ApiException

# Ensure project root is importable (so `import main` / `import cli` work reliably across environments)
import os as _os
_project_root = _os.path.dirname(_os.path.dirname(__file__))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from lrpbridge.events import EventLog
from lrpbridge.models import APPLICATION_URIS, LAST_UPDATED, LRP, PROCESS_GUID

NAMESPACE = "midgard"


def create_lrp(name: str, routes: str, instances: int = 1, last_updated: str = "1.0") -> LRP:
    return LRP(
        name=name,
        image="busybox",
        command=["/bin/sh", "-c", "sleep 1000"],
        env={"PORT": "8080"},
        target_instances=instances,
        metadata={PROCESS_GUID: name, LAST_UPDATED: last_updated, APPLICATION_URIS: routes},
    )


class FakeCoreV1Api:
    """Namespaced Service store with the API server's create/delete semantics."""

    def __init__(self):
        self.services: dict[tuple[str, str], client.V1Service] = {}
        self.calls: list[str] = []

    def create_namespaced_service(self, namespace, body, **kwargs):
        self.calls.append("create")
        key = (namespace, body.metadata.name)
        if key in self.services:
            raise ApiException(status=409, reason="AlreadyExists")
        self.services[key] = body
        return body

    def read_namespaced_service(self, name, namespace, **kwargs):
        try:
            return self.services[(namespace, name)]
        except KeyError:
            raise ApiException(status=404, reason="NotFound") from None

    def list_namespaced_service(self, namespace, **kwargs):
        items = [s for (ns, _), s in self.services.items() if ns == namespace]
        return client.V1ServiceList(items=items)

    def patch_namespaced_service(self, name, namespace, body, **kwargs):
        self.calls.append("patch")
        svc = self.read_namespaced_service(name, namespace)
        annotations = dict(svc.metadata.annotations or {})
        annotations.update(body.get("metadata", {}).get("annotations", {}))
        svc.metadata.annotations = annotations
        return svc

    def delete_namespaced_service(self, name, namespace, **kwargs):
        self.calls.append("delete")
        if (namespace, name) not in self.services:
            raise ApiException(status=404, reason="NotFound")
        del self.services[(namespace, name)]


class FakeAppsV1Api:
    """Namespaced Deployment store; `errors` maps a verb to the exception it raises."""

    def __init__(self):
        self.deployments: dict[tuple[str, str], client.V1Deployment] = {}
        self.errors: dict[str, Exception] = {}
        self.request_timeouts: list = []

    def _maybe_fail(self, verb, kwargs):
        self.request_timeouts.append(kwargs.get("_request_timeout"))
        if verb in self.errors:
            raise self.errors[verb]

    def create_namespaced_deployment(self, namespace, body, **kwargs):
        self._maybe_fail("create", kwargs)
        key = (namespace, body.metadata.name)
        if key in self.deployments:
            raise ApiException(status=409, reason="AlreadyExists")
        self.deployments[key] = body
        return body

    def read_namespaced_deployment(self, name, namespace, **kwargs):
        self._maybe_fail("read", kwargs)
        try:
            return self.deployments[(namespace, name)]
        except KeyError:
            raise ApiException(status=404, reason="NotFound") from None

    def list_namespaced_deployment(self, namespace, **kwargs):
        self._maybe_fail("list", kwargs)
        items = [d for (ns, _), d in self.deployments.items() if ns == namespace]
        return client.V1DeploymentList(items=items)

    def patch_namespaced_deployment(self, name, namespace, body, **kwargs):
        self._maybe_fail("patch", kwargs)
        d = self.read_namespaced_deployment(name, namespace)
        annotations = dict(d.metadata.annotations or {})
        annotations.update(body.get("metadata", {}).get("annotations", {}))
        d.metadata.annotations = annotations
        if "replicas" in body.get("spec", {}):
            d.spec.replicas = body["spec"]["replicas"]
        return d

    def delete_namespaced_deployment(self, name, namespace, **kwargs):
        self._maybe_fail("delete", kwargs)
        if (namespace, name) not in self.deployments:
            raise ApiException(status=404, reason="NotFound")
        del self.deployments[(namespace, name)]


@pytest.fixture
def events():
    log = EventLog()
    yield log
    log.close()


@pytest.fixture
def core_api():
    return FakeCoreV1Api()


@pytest.fixture
def apps_api():
    return FakeAppsV1Api()
