import copy

from azureshootcheck.api import (
    InfrastructureConfig,
    NetworkConfig,
    VNet,
    Worker,
    Zone,
    infrastructure_zone_to_string,
)


def test_single_subnet_layout_without_zones():
    infra = InfrastructureConfig(networks=NetworkConfig(workers="10.250.3.0/24"))
    assert infra.is_using_single_subnet_layout() is True


def test_multiple_subnet_layout_with_zones():
    infra = InfrastructureConfig(
        zoned=True,
        networks=NetworkConfig(zones=[Zone(name=1, cidr="10.250.0.0/24")]),
    )
    assert infra.is_using_single_subnet_layout() is False


def test_zone_to_string():
    assert infrastructure_zone_to_string(1) == "1"
    assert infrastructure_zone_to_string(2) == str(2)


def test_defaults():
    infra = InfrastructureConfig()
    assert infra.zoned is False
    assert infra.networks.vnet == VNet()
    assert infra.networks.workers is None
    assert infra.resource_group is None


def test_default_lists_are_not_shared():
    first, second = Worker(name="a"), Worker(name="b")
    first.zones.append("1")
    assert second.zones == []


def test_deep_copy_is_independent():
    infra = InfrastructureConfig(networks=NetworkConfig(zones=[Zone(name=1, cidr="10.250.0.0/24")]))
    clone = copy.deepcopy(infra)
    clone.networks.zones[0].cidr = "10.0.0.0/24"
    assert infra.networks.zones[0].cidr == "10.250.0.0/24"
    assert clone != infra