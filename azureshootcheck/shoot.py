"""Validation of the worker and networking sections of a shoot."""

from __future__ import annotations

from typing import Iterable

from .api import DataVolume, InfrastructureConfig, Networking, Volume, Worker, infrastructure_zone_to_string
from .errors import (
    FieldError,
    FieldPath,
    invalid,
    not_supported,
    required,
    too_many,
    validate_immutable_field,
)

MAX_DATA_VOLUME_COUNT = 64


def _root(path: FieldPath | None) -> FieldPath:
    return FieldPath() if path is None else path


def validate_networking(networking: Networking, path: FieldPath | None) -> list[FieldError]:
    """Require a nodes CIDR in the shoot's networking section."""
    if networking.nodes is None:
        return [required(_root(path).child("nodes"), "a nodes CIDR must be provided for Azure shoots")]
    return []


def validate_workers(
    workers: Iterable[Worker], infra: InfrastructureConfig, path: FieldPath | None
) -> list[FieldError]:
    """Validate volumes and zones of each worker group."""
    path = _root(path)
    errors: list[FieldError] = []
    infra_zones = {infrastructure_zone_to_string(zone.name) for zone in infra.networks.zones}

    for i, worker in enumerate(workers):
        worker_path = path.index(i)

        if worker.volume is None:
            errors.append(required(worker_path.child("volume"), "must not be nil"))
        else:
            errors += _validate_volume(worker.volume, worker_path.child("volume"))

        if len(worker.data_volumes) > MAX_DATA_VOLUME_COUNT:
            errors.append(too_many(worker_path.child("dataVolumes"), len(worker.data_volumes), MAX_DATA_VOLUME_COUNT))
        for j, volume in enumerate(worker.data_volumes):
            errors += _validate_volume(volume, worker_path.child("dataVolumes").index(j))

        zones_path = worker_path.child("zones")
        if infra.zoned and not worker.zones:
            errors.append(required(zones_path, "at least one zone must be configured for zoned clusters"))
            continue
        if not infra.zoned and worker.zones:
            errors.append(required(zones_path, "zones must not be specified for non zoned clusters"))
            continue

        seen: set[str] = set()
        for j, zone in enumerate(worker.zones):
            if zone in seen:
                errors.append(invalid(zones_path.index(j), zone, "must only be specified once per worker group"))
                continue
            seen.add(zone)

        if not infra.is_using_single_subnet_layout():
            for j, zone in enumerate(worker.zones):
                if zone not in infra_zones:
                    errors.append(
                        invalid(
                            zones_path.index(j),
                            zone,
                            'zone configuration must be specified in "infrastructureConfig.networks.zones"',
                        )
                    )

    return errors


def should_enforce_immutability(new_zones: list[str], old_zones: list[str]) -> bool:
    """True unless the new zones keep the old ones unchanged and in order, possibly adding more at the end."""
    new_zones = list(new_zones or [])
    old_zones = list(old_zones or [])
    if len(new_zones) < len(old_zones):
        return True
    return new_zones[: len(old_zones)] != old_zones


def validate_workers_update(
    old_workers: Iterable[Worker], new_workers: Iterable[Worker], path: FieldPath | None
) -> list[FieldError]:
    """Forbid removing or reordering the zones of existing worker groups."""
    path = _root(path)
    old_by_name: dict[str, Worker] = {}
    for worker in old_workers:
        old_by_name.setdefault(worker.name, worker)

    errors: list[FieldError] = []
    for i, new_worker in enumerate(new_workers):
        old_worker = old_by_name.get(new_worker.name)
        if old_worker is None:
            continue
        if should_enforce_immutability(new_worker.zones, old_worker.zones):
            errors += validate_immutable_field(new_worker.zones, old_worker.zones, path.index(i).child("zones"))
    return errors


def _validate_volume(volume: Volume | DataVolume, path: FieldPath) -> list[FieldError]:
    errors: list[FieldError] = []
    if volume.type is None:
        errors.append(required(path.child("type"), "must not be empty"))
    if not volume.volume_size:
        errors.append(required(path.child("size"), "must not be empty"))
    if volume.encrypted is not None:
        errors.append(not_supported(path.child("encrypted"), volume.encrypted, None))
    return errors