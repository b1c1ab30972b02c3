"""Data types describing the provider configuration of a cluster."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class DomainCount:
    region: str = ""
    count: int = 0


@dataclass
class MachineImageVersion:
    version: str = ""
    urn: str | None = None
    id: str | None = None


@dataclass
class MachineImages:
    name: str = ""
    versions: list[MachineImageVersion] = field(default_factory=list)


@dataclass
class CloudProfileConfig:
    count_update_domains: list[DomainCount] = field(default_factory=list)
    count_fault_domains: list[DomainCount] = field(default_factory=list)
    machine_images: list[MachineImages] = field(default_factory=list)


@dataclass
class ResourceGroup:
    name: str = ""


@dataclass
class VNet:
    name: str | None = None
    resource_group: str | None = None
    cidr: str | None = None


@dataclass
class PublicIPReference:
    name: str = ""
    resource_group: str = ""
    zone: int = 0


@dataclass
class ZonedPublicIPReference:
    name: str = ""
    resource_group: str = ""


@dataclass
class NatGatewayConfig:
    enabled: bool = False
    idle_connection_timeout_minutes: int | None = None
    zone: int | None = None
    ip_addresses: list[PublicIPReference] | None = None


@dataclass
class ZonedNatGatewayConfig:
    enabled: bool = False
    idle_connection_timeout_minutes: int | None = None
    ip_addresses: list[ZonedPublicIPReference] | None = None


@dataclass
class Zone:
    name: int = 0
    cidr: str = ""
    nat_gateway: ZonedNatGatewayConfig | None = None


@dataclass
class NetworkConfig:
    vnet: VNet = field(default_factory=VNet)
    workers: str | None = None
    nat_gateway: NatGatewayConfig | None = None
    service_endpoints: list[str] = field(default_factory=list)
    zones: list[Zone] = field(default_factory=list)


@dataclass
class IdentityConfig:
    name: str = ""
    resource_group: str = ""


@dataclass
class InfrastructureConfig:
    networks: NetworkConfig = field(default_factory=NetworkConfig)
    resource_group: ResourceGroup | None = None
    zoned: bool = False
    identity: IdentityConfig | None = None

    def is_using_single_subnet_layout(self) -> bool:
        """True when no dedicated per-zone subnets are configured."""
        return not self.networks.zones


@dataclass
class AvailabilityZone:
    name: str = ""


@dataclass
class Region:
    name: str = ""
    zones: list[AvailabilityZone] = field(default_factory=list)


@dataclass
class Volume:
    type: str | None = None
    volume_size: str = ""
    encrypted: bool | None = None


@dataclass
class DataVolume:
    name: str = ""
    type: str | None = None
    volume_size: str = ""
    encrypted: bool | None = None


@dataclass
class Worker:
    name: str = ""
    volume: Volume | None = None
    data_volumes: list[DataVolume] = field(default_factory=list)
    zones: list[str] = field(default_factory=list)


@dataclass
class Networking:
    nodes: str | None = None
    pods: str | None = None
    services: str | None = None


def infrastructure_zone_to_string(zone: int) -> str:
    """Render an infrastructure zone number the way availability zones are named."""
    return f"{zone:d}"