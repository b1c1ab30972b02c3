import pytest
import yaml

from azureshootcheck.config import API_VERSION, ETCD, ControllerConfiguration, ETCDBackup, ETCDStorage
from azureshootcheck.loader import ConfigLoadError, load, load_from_file

DOCUMENT = f"""\
apiVersion: {API_VERSION}
kind: ControllerConfiguration
clientConnection:
  acceptContentTypes: application/json
  contentType: application/json
  qps: 100
  burst: 130
etcd:
  storage:
    className: gardener.cloud-fast
    capacity: 25Gi
  backup:
    schedule: "0 */24 * * *"
healthCheckConfig:
  syncPeriod: 30s
"""


def test_empty_data_gives_default():
    assert load(b"") == ControllerConfiguration()


def test_load_document():
    cfg = load(DOCUMENT)
    assert cfg.etcd.storage.class_name == "gardener.cloud-fast"
    assert cfg.etcd.storage.capacity == "25Gi"
    assert cfg.etcd.backup.schedule == "0 */24 * * *"
    assert cfg.client_connection["qps"] == 100
    assert cfg.health_check_config == {"syncPeriod": "30s"}


def test_load_bytes_equals_str():
    assert load(DOCUMENT.encode()) == load(DOCUMENT)


def test_round_trip_through_yaml():
    cfg = ControllerConfiguration(
        etcd=ETCD(storage=ETCDStorage(class_name="fast", capacity="10Gi"), backup=ETCDBackup(schedule="@daily"))
    )
    assert load(yaml.safe_dump(cfg.to_dict())) == cfg


def test_load_from_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(DOCUMENT)
    assert load_from_file(path) == load(DOCUMENT)


def test_load_from_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_from_file(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    "text",
    [
        "kind: ControllerConfiguration\n",
        f"apiVersion: {API_VERSION}\nkind: Other\n",
        f"apiVersion: {API_VERSION}\n",
        "apiVersion: other.group/v1\nkind: ControllerConfiguration\n",
        "- a\n- b\n",
        "etcd: [unclosed\n",
        f"apiVersion: {API_VERSION}\nkind: ControllerConfiguration\netcd:\n  storage:\n    capacity: lots\n",
    ],
)
def test_invalid_documents_raise(text):
    with pytest.raises(ConfigLoadError):
        load(text)


def test_load_error_is_value_error():
    with pytest.raises(ValueError):
        load("kind: Other\n")