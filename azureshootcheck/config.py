"""Controller configuration of the provider and its v1alpha1 document form."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, NamedTuple

GROUP_NAME = "azure.provider.extensions.config.gardener.cloud"
VERSION = "v1alpha1"
API_VERSION = f"{GROUP_NAME}/{VERSION}"
KIND = "ControllerConfiguration"

_QUANTITY = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+|[KMGTPE]i|[numkMGTPE])?$")


class _GroupKind(NamedTuple):
    group: str
    kind: str

    def __str__(self) -> str:
        return self.kind if not self.group else f"{self.kind}.{self.group}"


class _GroupResource(NamedTuple):
    group: str
    resource: str

    def __str__(self) -> str:
        return self.resource if not self.group else f"{self.resource}.{self.group}"


def kind(name: str) -> _GroupKind:
    """Qualify a kind with this configuration's API group."""
    return _GroupKind(GROUP_NAME, name)


def resource(name: str) -> _GroupResource:
    """Qualify a resource with this configuration's API group."""
    return _GroupResource(GROUP_NAME, name)


def _optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{key} must be a string, got {type(value).__name__}")
    return value


def _optional_mapping(data: Mapping[str, Any], key: str) -> dict[str, Any] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ValueError(f"{key} must be a mapping, got {type(value).__name__}")
    return dict(value)


def _quantity(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ValueError(f"capacity must be a quantity, got {type(value).__name__}")
    text = str(value)
    if not _QUANTITY.match(text):
        raise ValueError(f"quantities must match the regular expression {_QUANTITY.pattern!r}: {text!r}")
    return text


@dataclass
class ETCDStorage:
    """Storage settings of etcd-main volume claims."""

    class_name: str | None = None
    capacity: str | None = None


@dataclass
class ETCDBackup:
    """Backup settings of etcd."""

    schedule: str | None = None


@dataclass
class ETCD:
    storage: ETCDStorage = field(default_factory=ETCDStorage)
    backup: ETCDBackup = field(default_factory=ETCDBackup)


@dataclass
class ControllerConfiguration:
    """Configuration of the provider's controllers."""

    client_connection: dict[str, Any] | None = None
    etcd: ETCD = field(default_factory=ETCD)
    health_check_config: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ControllerConfiguration":
        """Build a configuration from its v1alpha1 document form; unknown keys are ignored."""
        if not isinstance(data, Mapping):
            raise ValueError(f"configuration must be a mapping, got {type(data).__name__}")
        etcd_data = _optional_mapping(data, "etcd") or {}
        storage_data = _optional_mapping(etcd_data, "storage") or {}
        backup_data = _optional_mapping(etcd_data, "backup") or {}
        return cls(
            client_connection=_optional_mapping(data, "clientConnection"),
            etcd=ETCD(
                storage=ETCDStorage(
                    class_name=_optional_str(storage_data, "className"),
                    capacity=_quantity(storage_data.get("capacity")),
                ),
                backup=ETCDBackup(schedule=_optional_str(backup_data, "schedule")),
            ),
            health_check_config=_optional_mapping(data, "healthCheckConfig"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the v1alpha1 document form of this configuration."""
        storage: dict[str, Any] = {}
        if self.etcd.storage.class_name is not None:
            storage["className"] = self.etcd.storage.class_name
        if self.etcd.storage.capacity is not None:
            storage["capacity"] = self.etcd.storage.capacity
        backup: dict[str, Any] = {}
        if self.etcd.backup.schedule is not None:
            backup["schedule"] = self.etcd.backup.schedule

        document: dict[str, Any] = {"apiVersion": API_VERSION, "kind": KIND}
        if self.client_connection is not None:
            document["clientConnection"] = dict(self.client_connection)
        document["etcd"] = {"storage": storage, "backup": backup}
        if self.health_check_config is not None:
            document["healthCheckConfig"] = dict(self.health_check_config)
        return document