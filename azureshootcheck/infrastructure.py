"""Validation of the infrastructure section of a cluster."""

from __future__ import annotations

from .api import (
    InfrastructureConfig,
    NatGatewayConfig,
    NetworkConfig,
    PublicIPReference,
    Region,
    ResourceGroup,
    VNet,
    Zone,
    ZonedNatGatewayConfig,
    ZonedPublicIPReference,
    infrastructure_zone_to_string,
)
from .cidr import (
    CIDR,
    validate_cidr_is_canonical,
    validate_cidr_overlap,
    validate_cidr_parse,
)
from .errors import (
    FieldError,
    FieldPath,
    forbidden,
    invalid,
    not_supported,
    required,
    validate_immutable_field,
)

SHOOT_VMO_USAGE_ANNOTATION = "alpha.azure.provider.extensions.gardener.cloud/vmo"

NAT_GATEWAY_MIN_TIMEOUT_IN_MINUTES = 4
NAT_GATEWAY_MAX_TIMEOUT_IN_MINUTES = 120


def _root(path: FieldPath | None) -> FieldPath:
    return FieldPath() if path is None else path


def validate_infrastructure_config_against_cloud_profile(
    old_infra: InfrastructureConfig | None,
    infra: InfrastructureConfig,
    shoot_region: str,
    regions: list[Region],
    path: FieldPath | None,
) -> list[FieldError]:
    """Check that the configured zones exist in the shoot's region of the cloud profile."""
    if infra.is_using_single_subnet_layout():
        return []
    zones_path = _root(path).child("networks").child("zones")
    for region in regions:
        if region.name == shoot_region:
            return _validate_infrastructure_config_zones(old_infra, infra, region, zones_path)
    return []


def _validate_infrastructure_config_zones(
    old_infra: InfrastructureConfig | None,
    infra: InfrastructureConfig,
    region: Region,
    path: FieldPath,
) -> list[FieldError]:
    available = {zone.name for zone in region.zones}
    old_names = {zone.name for zone in old_infra.networks.zones} if old_infra is not None else set()
    errors: list[FieldError] = []
    for i, zone in enumerate(infra.networks.zones):
        # Zones already accepted before stay valid even if removed from the cloud profile.
        if zone.name in old_names:
            continue
        if infrastructure_zone_to_string(zone.name) not in available:
            errors.append(not_supported(path.index(i).child("name"), zone.name, sorted(available)))
    return errors


def validate_infrastructure_config(
    infra: InfrastructureConfig,
    nodes_cidr: str | None,
    pods_cidr: str | None,
    services_cidr: str | None,
    has_vmo_alpha_annotation: bool,
    path: FieldPath | None,
) -> list[FieldError]:
    """Validate an infrastructure configuration against the shoot's network ranges."""
    path = _root(path)
    nodes = CIDR(nodes_cidr) if nodes_cidr is not None else None
    pods = CIDR(pods_cidr) if pods_cidr is not None else None
    services = CIDR(services_cidr) if services_cidr is not None else None

    errors: list[FieldError] = []

    # Deployments into existing resource groups are blocked because self-created
    # resources would be orphaned when the cluster is deleted.
    if infra.resource_group is not None:
        errors.append(
            invalid(
                path.child("resourceGroup"),
                infra.resource_group,
                "specifying an existing resource group is not supported yet",
            )
        )

    if infra.zoned and has_vmo_alpha_annotation:
        errors.append(
            invalid(
                path.child("zoned"),
                infra.zoned,
                f'specifying a zoned cluster and having the "{SHOOT_VMO_USAGE_ANNOTATION}" '
                "annotation is not allowed",
            )
        )

    errors += _validate_network_config(infra, nodes, pods, services, has_vmo_alpha_annotation, path)

    if infra.identity is not None and (not infra.identity.name or not infra.identity.resource_group):
        errors.append(
            invalid(
                path.child("identity"),
                infra.identity,
                "specifying an identity requires the name of the identity and the resource group "
                "which hosts the identity",
            )
        )

    return errors


def _validate_network_config(
    infra: InfrastructureConfig,
    nodes: CIDR | None,
    pods: CIDR | None,
    services: CIDR | None,
    has_vmo_alpha_annotation: bool,
    path: FieldPath,
) -> list[FieldError]:
    config = infra.networks
    networks_path = path.child("networks")
    workers_path = networks_path.child("workers")
    zones_path = networks_path.child("zones")
    vnet_path = networks_path.child("vnet")

    if config.workers is None and not config.zones:
        return [forbidden(workers_path, "either workers or zones must be specified")]
    if config.workers is not None and config.zones:
        return [forbidden(workers_path, "workers and zones cannot be specified in parallel")]

    workers = CIDR(config.workers, workers_path) if config.workers is not None else None

    errors = _validate_vnet_config(
        config, infra.resource_group, workers, nodes, pods, services, zones_path, vnet_path
    )

    if infra.is_using_single_subnet_layout():
        errors += validate_cidr_parse(workers)
        errors += validate_cidr_is_canonical(workers_path, config.workers or "")
        if nodes is not None:
            errors += nodes.validate_subset(workers)
        errors += _validate_nat_gateway_config(
            config.nat_gateway, infra.zoned, has_vmo_alpha_annotation, networks_path.child("natGateway")
        )
        return errors

    if not infra.zoned:
        errors.append(forbidden(zones_path, "cannot specify zones in an non-zonal cluster"))
    if config.nat_gateway is not None:
        errors.append(forbidden(workers_path, "natGateway cannot be specified when workers field is missing"))
    if config.service_endpoints:
        errors.append(
            forbidden(workers_path, "serviceEndpoints cannot be specified when workers field is missing")
        )

    errors += _validate_zones(config.zones, nodes, pods, services, zones_path)
    return errors


def _validate_vnet_config(
    network_config: NetworkConfig,
    resource_group: ResourceGroup | None,
    workers: CIDR | None,
    nodes: CIDR | None,
    pods: CIDR | None,
    services: CIDR | None,
    zones_path: FieldPath,
    vnet_path: FieldPath,
) -> list[FieldError]:
    vnet = network_config.vnet

    if (vnet.name is None) != (vnet.resource_group is None):
        return [invalid(vnet_path, vnet, "a vnet cidr or vnet name and resource group need to be specified")]

    errors: list[FieldError] = []

    if _is_external_vnet_used(vnet):
        if vnet.cidr is not None:
            errors.append(
                invalid(vnet_path.child("cidr"), vnet, "specifying a cidr for an existing vnet is not possible")
            )
        if resource_group is not None and vnet.resource_group == resource_group.name:
            errors.append(
                invalid(
                    vnet_path.child("resourceGroup"),
                    vnet.resource_group,
                    "the vnet resource group must not be the same as the cluster resource group",
                )
            )
        return errors

    if _is_default_vnet_config(vnet):
        if workers is None:
            errors.append(
                forbidden(
                    vnet_path.child("cidr"),
                    "a vnet cidr or vnet reference must be specified when the workers field is not set",
                )
            )
            return errors
        errors += workers.validate_subset(nodes)
        errors += workers.validate_not_overlap(pods, services)
        return errors

    assert vnet.cidr is not None
    vnet_cidr = CIDR(vnet.cidr, vnet_path.child("cidr"))
    errors += vnet_cidr.validate_parse()
    errors += validate_cidr_is_canonical(vnet_path.child("cidr"), vnet.cidr)
    errors += vnet_cidr.validate_subset(nodes)
    errors += vnet_cidr.validate_not_overlap(pods, services)
    if workers is not None:
        errors += vnet_cidr.validate_subset(workers)
    for i, zone in enumerate(network_config.zones):
        errors += vnet_cidr.validate_subset(CIDR(zone.cidr, zones_path.index(i).child("cidr")))
    return errors


def _validate_zones(
    zones: list[Zone],
    nodes: CIDR | None,
    pods: CIDR | None,
    services: CIDR | None,
    path: FieldPath,
) -> list[FieldError]:
    errors: list[FieldError] = []
    seen: set[int] = set()
    zone_cidrs: list[CIDR] = []

    for i, zone in enumerate(zones):
        zone_path = path.index(i)
        if zone.name in seen:
            errors.append(invalid(zone_path, zone.name, "the same zone cannot be specified multiple times"))
        seen.add(zone.name)

        cidr_path = zone_path.child("cidr")
        zone_cidrs.append(CIDR(zone.cidr, cidr_path))
        errors += validate_cidr_is_canonical(cidr_path, zone.cidr)

        errors += _validate_zoned_nat_gateway_config(zone.nat_gateway, zone_path.child("natGateway"))

    errors += validate_cidr_parse(*zone_cidrs)
    if nodes is not None:
        errors += nodes.validate_subset(*zone_cidrs)
    errors += validate_cidr_overlap(list(zone_cidrs), False)
    if pods is not None:
        errors += pods.validate_not_overlap(*zone_cidrs)
    if services is not None:
        errors += services.validate_not_overlap(*zone_cidrs)
    return errors


def _validate_nat_gateway_config(
    config: NatGatewayConfig | None,
    zoned: bool,
    has_vmo_alpha_annotation: bool,
    path: FieldPath,
) -> list[FieldError]:
    if config is None:
        return []

    if not config.enabled:
        if (
            config.zone is not None
            or config.idle_connection_timeout_minutes is not None
            or config.ip_addresses is not None
        ):
            return [invalid(path, config, "NatGateway is disabled but additional NatGateway config is passed")]
        return []

    # NatGateways are incompatible with the Basic SKU load balancers that
    # availability-set clusters require.
    if not zoned and not has_vmo_alpha_annotation:
        return [forbidden(path, "NatGateway is currently only supported for zonal and VMO clusters")]

    errors: list[FieldError] = []
    timeout = config.idle_connection_timeout_minutes
    if timeout is not None and not (
        NAT_GATEWAY_MIN_TIMEOUT_IN_MINUTES <= timeout <= NAT_GATEWAY_MAX_TIMEOUT_IN_MINUTES
    ):
        errors.append(
            invalid(
                path.child("idleConnectionTimeoutMinutes"),
                timeout,
                "idleConnectionTimeoutMinutes values must range between 4 and 120",
            )
        )

    if config.zone is None:
        if config.ip_addresses:
            errors.append(invalid(path.child("zone"), config, "Public IPs can only be selected for zonal NatGateways"))
        return errors

    errors += _validate_nat_gateway_ip_reference(config.ip_addresses or [], config.zone, path.child("ipAddresses"))
    return errors


def _validate_nat_gateway_ip_reference(
    references: list[PublicIPReference], zone: int, path: FieldPath
) -> list[FieldError]:
    errors: list[FieldError] = []
    for i, ref in enumerate(references):
        if ref.zone != zone:
            errors.append(
                invalid(
                    path.index(i).child("zone"),
                    ref.zone,
                    f"Public IP can't be used as it is not in the same zone as the NatGateway (zone {zone})",
                )
            )
        errors += _validate_ip_reference_names(ref.name, ref.resource_group, path.index(i))
    return errors


def _validate_ip_reference_names(name: str, resource_group: str, path: FieldPath) -> list[FieldError]:
    errors: list[FieldError] = []
    if not name:
        errors.append(required(path.child("name"), "Name for NatGateway public ip resource is required"))
    if not resource_group:
        errors.append(
            required(path.child("resourceGroup"), "ResourceGroup for NatGateway public ip resouce is required")
        )
    return errors


def _validate_zoned_nat_gateway_config(config: ZonedNatGatewayConfig | None, path: FieldPath) -> list[FieldError]:
    if config is None:
        return []
    if not config.enabled:
        if config.idle_connection_timeout_minutes is not None or config.ip_addresses is not None:
            return [invalid(path, config, "NatGateway is disabled but additional NatGateway config is passed")]
        return []
    return _validate_zoned_public_ip_reference(config.ip_addresses or [], path.child("ipAddresses"))


def _validate_zoned_public_ip_reference(
    references: list[ZonedPublicIPReference], path: FieldPath
) -> list[FieldError]:
    errors: list[FieldError] = []
    for i, ref in enumerate(references):
        errors += _validate_ip_reference_names(ref.name, ref.resource_group, path.index(i))
    return errors


def validate_infrastructure_config_update(
    old_config: InfrastructureConfig,
    new_config: InfrastructureConfig,
    path: FieldPath | None,
) -> list[FieldError]:
    """Validate the changes from one infrastructure configuration to the next."""
    path = _root(path)
    networks_path = path.child("networks")
    errors: list[FieldError] = []

    errors += validate_immutable_field(new_config.resource_group, old_config.resource_group, path.child("resourceGroup"))

    if old_config.networks.workers is not None and new_config.networks.workers is not None:
        errors += validate_immutable_field(
            new_config.networks.workers, old_config.networks.workers, networks_path.child("workers")
        )

    old_single = old_config.is_using_single_subnet_layout()
    new_single = new_config.is_using_single_subnet_layout()
    if not old_single and not new_single:
        errors += _validate_zones_update(old_config, new_config, path)
    elif not old_single and new_single:
        errors.append(
            forbidden(
                networks_path.child("worker"),
                "updating the infrastructure configuration from using dedicated subnets per zone "
                "to using single subnet is not allowed",
            )
        )
    elif old_single and not new_single:
        errors += _validate_single_subnet_to_multiple_subnet_transition(old_config, new_config, path)
    else:
        errors += validate_immutable_field(
            new_config.networks.workers, old_config.networks.workers, networks_path.child("workers")
        )

    errors += validate_immutable_field(old_config.zoned, new_config.zoned, path.child("zoned"))
    errors += _validate_vnet_config_update(old_config.networks, new_config.networks, networks_path)
    return errors


def validate_vmo_config_update(
    old_has_annotation: bool, new_has_annotation: bool, path: FieldPath | None
) -> list[FieldError]:
    """Forbid adding or removing the VMO annotation on an existing shoot."""
    annotations_path = _root(path).child("annotations")
    if not old_has_annotation and new_has_annotation:
        return [
            forbidden(
                annotations_path,
                f'not allowed to add annotation "{SHOOT_VMO_USAGE_ANNOTATION}" to an already existing shoot cluster',
            )
        ]
    if old_has_annotation and not new_has_annotation:
        return [
            forbidden(
                annotations_path,
                f'not allowed to remove annotation "{SHOOT_VMO_USAGE_ANNOTATION}" to an already existing shoot cluster',
            )
        ]
    return []


def _validate_vnet_config_update(old: NetworkConfig, new: NetworkConfig, path: FieldPath) -> list[FieldError]:
    if _is_external_vnet_used(old.vnet) or _is_default_vnet_config(old.vnet):
        return [
            *validate_immutable_field(new.vnet.name, old.vnet.name, path.child("vnet", "name")),
            *validate_immutable_field(
                new.vnet.resource_group, old.vnet.resource_group, path.child("vnet", "resourceGroup")
            ),
        ]
    if old.vnet.cidr is not None and new.vnet.cidr is None:
        return [invalid(path.child("vnet", "cidr"), new.vnet.cidr, "vnet cidr need to be specified")]
    return []


def _validate_single_subnet_to_multiple_subnet_transition(
    old: InfrastructureConfig, new: InfrastructureConfig, path: FieldPath
) -> list[FieldError]:
    if any(zone.cidr == old.networks.workers for zone in new.networks.zones):
        return []
    return [
        forbidden(
            path.child("networks", "zones"),
            "when updating InfrastructureConfig to use dedicated subnets per zones, the CIDR for one of "
            "the zones must match that of the previous config.networks.workers",
        )
    ]


def _validate_zones_update(
    old: InfrastructureConfig, new: InfrastructureConfig, path: FieldPath
) -> list[FieldError]:
    zones_path = path.child("networks", "zones")
    old_zones = old.networks.zones
    new_zones = new.networks.zones
    errors: list[FieldError] = []

    if len(old_zones) > len(new_zones):
        errors.append(forbidden(zones_path, "removing zones is not allowed"))

    for i, new_zone in enumerate(new_zones):
        for old_zone in old_zones:
            if new_zone.name == old_zone.name:
                errors += validate_immutable_field(new_zone.cidr, old_zone.cidr, zones_path.index(i).child("cidr"))
    return errors


def _is_external_vnet_used(vnet: VNet | None) -> bool:
    return vnet is not None and vnet.name is not None and vnet.resource_group is not None


def _is_default_vnet_config(vnet: VNet) -> bool:
    return vnet.cidr is None and vnet.name is None and vnet.resource_group is None