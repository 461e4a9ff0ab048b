from __future__ import annotations

from dataclasses import dataclass

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException

from .errors import BridgeError, ConflictError, NotFoundError, OrchestrationError
from .settings import Settings


@dataclass(frozen=True)
class KubeApis:
    core: client.CoreV1Api
    apps: client.AppsV1Api


def load_apis(s: Settings) -> KubeApis:
    """Build API handles from a kubeconfig file, or in-cluster config when unset."""
    if s.kubeconfig:
        config.load_kube_config(config_file=s.kubeconfig)
    else:
        config.load_incluster_config()
    api_client = client.ApiClient()
    return KubeApis(core=client.CoreV1Api(api_client), apps=client.AppsV1Api(api_client))


def translate_api_error(e: ApiException, what: str) -> BridgeError:
    if e.status == 404:
        return NotFoundError(f"{what} not found")
    if e.status == 409:
        return ConflictError(f"{what} already exists")
    return OrchestrationError(f"{what}: kubernetes API error {e.status} {e.reason}")
