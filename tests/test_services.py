import pytest
from kubernetes import client
from kubernetes.client.exceptions import ApiException

from conftest import NAMESPACE, create_lrp
from lrpbridge.errors import ConflictError, NotFoundError, OrchestrationError
from lrpbridge.naming import headless_service_name, routable_service_name
from lrpbridge.services import ServiceManager, to_headless_service, to_service


@pytest.fixture
def manager(core_api, events):
    return ServiceManager(core_api, NAMESPACE, events)


def test_create_exposes_lrp(manager, core_api):
    lrp = create_lrp("baldur", "54321.0")

    manager.create(lrp)

    service = core_api.read_namespaced_service(routable_service_name("baldur"), NAMESPACE)
    assert service == to_service(lrp, NAMESPACE)
    assert service.spec.selector == {"name": "baldur"}
    assert service.metadata.labels == {"name": "baldur"}
    assert [p.port for p in service.spec.ports] == [8080]
    assert service.metadata.annotations == {"routes": "54321.0"}
    assert service.spec.cluster_ip is None


def test_recreate_conflicts_and_keeps_original(manager, core_api):
    manager.create(create_lrp("baldur", "54321.0"))

    with pytest.raises(ConflictError):
        manager.create(create_lrp("baldur", "99999.9"))

    service = core_api.read_namespaced_service(routable_service_name("baldur"), NAMESPACE)
    assert service.metadata.annotations == {"routes": "54321.0"}


def test_create_headless(manager, core_api):
    lrp = create_lrp("baldur", "54321.0")

    manager.create_headless(lrp)

    service = core_api.read_namespaced_service(headless_service_name("baldur"), NAMESPACE)
    assert service == to_headless_service(lrp, NAMESPACE)
    assert service.spec.cluster_ip == "None"
    assert service.spec.selector == {"name": "baldur"}
    assert not service.metadata.annotations


def test_recreate_headless_conflicts(manager):
    manager.create_headless(create_lrp("baldur", "54321.0"))
    with pytest.raises(ConflictError):
        manager.create_headless(create_lrp("baldur", "54321.0"))


def test_routable_and_headless_coexist(manager, core_api):
    lrp = create_lrp("baldur", "54321.0")
    manager.create(lrp)
    manager.create_headless(lrp)

    services = core_api.list_namespaced_service(NAMESPACE).items
    assert sorted(s.metadata.name for s in services) == sorted(
        [routable_service_name("baldur"), headless_service_name("baldur")]
    )


def test_create_conflict_is_logged(manager, events):
    manager.create(create_lrp("baldur", "54321.0"))
    with pytest.raises(ConflictError):
        manager.create(create_lrp("baldur", "54321.0"))

    latest = events.latest(limit=1)[0]
    assert latest["level"] == "ERROR"
    assert latest["operation"] == "create-service"
    assert latest["process_guid"] == "baldur"


def test_delete_service(manager, core_api):
    core_api.create_namespaced_service(NAMESPACE, to_service(create_lrp("odin", "1234.5"), NAMESPACE))

    manager.delete("odin")

    assert core_api.list_namespaced_service(NAMESPACE).items == []


def test_delete_missing_service_is_not_found(manager, core_api):
    core_api.create_namespaced_service(NAMESPACE, to_service(create_lrp("odin", "1234.5"), NAMESPACE))

    with pytest.raises(NotFoundError):
        manager.delete("tyr")
    assert len(core_api.list_namespaced_service(NAMESPACE).items) == 1


def test_delete_headless_service(manager, core_api):
    core_api.create_namespaced_service(NAMESPACE, to_headless_service(create_lrp("odin", "1234.5"), NAMESPACE))

    manager.delete_headless("odin")

    assert core_api.list_namespaced_service(NAMESPACE).items == []
    with pytest.raises(NotFoundError):
        manager.delete_headless("tyr")


def test_delete_does_not_touch_the_other_role(manager, core_api):
    core_api.create_namespaced_service(NAMESPACE, to_headless_service(create_lrp("odin", "1234.5"), NAMESPACE))

    with pytest.raises(NotFoundError):
        manager.delete("odin")
    assert len(core_api.list_namespaced_service(NAMESPACE).items) == 1


def test_create_delete_delete(manager):
    lrp = create_lrp("loki", "1.0")
    manager.create(lrp)
    manager.delete("loki")
    with pytest.raises(NotFoundError):
        manager.delete("loki")


def test_update_patches_routes_in_place(manager, core_api):
    manager.create(create_lrp("freya", "old.example.com"))

    manager.update(create_lrp("freya", "new.example.com"))

    service = core_api.read_namespaced_service(routable_service_name("freya"), NAMESPACE)
    assert service.metadata.annotations == {"routes": "new.example.com"}
    assert core_api.calls == ["create", "patch"]


def test_update_missing_service_is_not_found(manager):
    with pytest.raises(NotFoundError):
        manager.update(create_lrp("freya", "x"))


def test_api_failure_is_orchestration_error(manager, core_api, monkeypatch):
    def boom(*args, **kwargs):
        raise ApiException(status=500, reason="Internal Server Error")

    monkeypatch.setattr(core_api, "create_namespaced_service", boom)
    with pytest.raises(OrchestrationError):
        manager.create(create_lrp("baldur", "54321.0"))


def test_to_service_has_named_port():
    service = to_service(create_lrp("baldur", "54321.0"), NAMESPACE)
    assert service.spec.ports == [client.V1ServicePort(name="service", port=8080)]
    assert service.metadata.namespace == NAMESPACE
