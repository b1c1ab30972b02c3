import pytest

from azureshootcheck.config import (
    API_VERSION,
    ETCD,
    GROUP_NAME,
    KIND,
    ControllerConfiguration,
    ETCDBackup,
    ETCDStorage,
    kind,
    resource,
)


def test_kind_is_group_qualified():
    qualified = kind("ControllerConfiguration")
    assert qualified.group == "azure.provider.extensions.config.gardener.cloud"
    assert qualified.kind == "ControllerConfiguration"


def test_resource_is_group_qualified():
    qualified = resource("configs")
    assert qualified.group == GROUP_NAME
    assert qualified.resource == "configs"
    assert str(qualified) == "configs." + GROUP_NAME


def test_serialised_api_version_includes_version():
    document = ControllerConfiguration().to_dict()
    assert document["apiVersion"] == "azure.provider.extensions.config.gardener.cloud/v1alpha1"


def test_from_dict_reads_nested_fields():
    cfg = ControllerConfiguration.from_dict(
        {
            "apiVersion": API_VERSION,
            "kind": KIND,
            "clientConnection": {"qps": 100, "burst": 130},
            "etcd": {
                "storage": {"className": "gardener.cloud-fast", "capacity": "25Gi"},
                "backup": {"schedule": "0 */24 * * *"},
            },
            "healthCheckConfig": {"syncPeriod": "30s"},
        }
    )
    assert cfg.etcd.storage.class_name == "gardener.cloud-fast"
    assert cfg.etcd.storage.capacity == "25Gi"
    assert cfg.etcd.backup.schedule == "0 */24 * * *"
    assert cfg.client_connection == {"qps": 100, "burst": 130}
    assert cfg.health_check_config == {"syncPeriod": "30s"}


def test_from_dict_defaults():
    assert ControllerConfiguration.from_dict({}) == ControllerConfiguration()


def test_round_trip():
    cfg = ControllerConfiguration(
        client_connection={"kubeconfig": "/tmp/kubeconfig"},
        etcd=ETCD(storage=ETCDStorage(class_name="fast", capacity="80Gi"), backup=ETCDBackup(schedule="@daily")),
        health_check_config={"syncPeriod": "1m"},
    )
    assert ControllerConfiguration.from_dict(cfg.to_dict()) == cfg


def test_to_dict_omits_unset_optionals():
    document = ControllerConfiguration().to_dict()
    assert document["apiVersion"] == API_VERSION
    assert document["kind"] == KIND
    assert document["etcd"] == {"storage": {}, "backup": {}}
    assert "clientConnection" not in document
    assert "healthCheckConfig" not in document


def test_numeric_capacity_is_accepted():
    cfg = ControllerConfiguration.from_dict({"etcd": {"storage": {"capacity": 10}}})
    assert cfg.etcd.storage.capacity == "10"


@pytest.mark.parametrize(
    "data",
    [
        {"etcd": {"storage": {"capacity": "lots"}}},
        {"etcd": {"storage": {"className": 3}}},
        {"etcd": {"backup": {"schedule": ["x"]}}},
        {"etcd": "nope"},
        {"clientConnection": [1, 2]},
    ],
)
def test_invalid_values_raise(data):
    with pytest.raises(ValueError):
        ControllerConfiguration.from_dict(data)


def test_non_mapping_raises():
    with pytest.raises(ValueError):
        ControllerConfiguration.from_dict(["etcd"])