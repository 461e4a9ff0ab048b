from __future__ import annotations

from kubernetes import client

from .models import APPLICATION_URIS, LAST_UPDATED, LRP, PROCESS_GUID
from .services import NAME_LABEL, SERVICE_PORT


ANNOTATION_KEYS = (PROCESS_GUID, LAST_UPDATED, APPLICATION_URIS)


def to_deployment(lrp: LRP, namespace: str) -> client.V1Deployment:
    """Workload object for an LRP.

    Metadata keys become annotations so the LRP can be rebuilt from the
    Deployment alone; pods carry the `name` label both Services select on.
    """
    labels = {NAME_LABEL: lrp.name}
    annotations = {k: lrp.meta(k) for k in ANNOTATION_KEYS}
    container = client.V1Container(
        name="opi",
        image=lrp.image,
        command=list(lrp.command) or None,
        env=[client.V1EnvVar(name=k, value=v) for k, v in sorted(lrp.env.items())] or None,
        ports=[client.V1ContainerPort(container_port=SERVICE_PORT)],
    )
    return client.V1Deployment(
        api_version="apps/v1",
        kind="Deployment",
        metadata=client.V1ObjectMeta(
            name=lrp.name,
            namespace=namespace,
            labels=labels,
            annotations=annotations,
        ),
        spec=client.V1DeploymentSpec(
            replicas=lrp.target_instances,
            selector=client.V1LabelSelector(match_labels=labels),
            template=client.V1PodTemplateSpec(
                metadata=client.V1ObjectMeta(labels=labels),
                spec=client.V1PodSpec(containers=[container]),
            ),
        ),
    )


def deployment_to_lrp(deployment: client.V1Deployment) -> LRP:
    annotations = deployment.metadata.annotations or {}
    spec = deployment.spec
    status = deployment.status

    image = ""
    command: list[str] = []
    env: dict[str, str] = {}
    if spec and spec.template and spec.template.spec and spec.template.spec.containers:
        c = spec.template.spec.containers[0]
        image = c.image or ""
        command = list(c.command or [])
        env = {e.name: e.value or "" for e in (c.env or [])}

    return LRP(
        name=deployment.metadata.name,
        image=image,
        command=command,
        env=env,
        target_instances=(spec.replicas or 0) if spec else 0,
        running_instances=(status.available_replicas or 0) if status else 0,
        metadata={k: annotations.get(k, "") for k in ANNOTATION_KEYS},
    )


class DeploymentManager:
    """Reads the Deployments of a namespace; `list_lrps` is the identity-only view."""

    def __init__(self, apps_api: client.AppsV1Api, request_timeout: float | None = None):
        self.apps_api = apps_api
        self.request_timeout = request_timeout

    def list_deployments(self, namespace: str) -> list[client.V1Deployment]:
        # Direct passthrough read: ApiException propagates unchanged.
        deployments = self.apps_api.list_namespaced_deployment(
            namespace, _request_timeout=self.request_timeout
        )
        return list(deployments.items)

    def list_lrps(self, namespace: str) -> list[LRP]:
        return [LRP(name=(d.metadata.annotations or {}).get(PROCESS_GUID, "")) for d in self.list_deployments(namespace)]
