from collections import Counter

import pytest

from azureshootcheck.api import CloudProfileConfig, DomainCount, MachineImageVersion, MachineImages
from azureshootcheck.cloudprofile import validate_cloud_profile_config
from azureshootcheck.errors import ErrorType, FieldPath

URN = "Publisher:Offer:Sku:Version"
IMAGE_ID = "/subscription/id/image/id"
ROOT = FieldPath("root")
REQ = ErrorType.REQUIRED
INV = ErrorType.INVALID


def kinds(errors):
    return Counter((e.type, e.field) for e in errors)


@pytest.fixture
def config():
    return CloudProfileConfig(
        count_update_domains=[DomainCount(region="westeurope", count=1)],
        count_fault_domains=[DomainCount(region="westeurope", count=1)],
        machine_images=[
            MachineImages(name="ubuntu", versions=[MachineImageVersion(version="Version", urn=URN)])
        ],
    )


def test_valid_config(config):
    assert validate_cloud_profile_config(config, ROOT) == []


def test_requires_machine_image(config):
    config.machine_images = []
    assert kinds(validate_cloud_profile_config(config, ROOT)) == Counter({(REQ, "root.machineImages"): 1})


def test_forbids_empty_machine_image(config):
    config.machine_images = [MachineImages()]
    assert kinds(validate_cloud_profile_config(config, ROOT)) == Counter(
        {(REQ, "root.machineImages[0].name"): 1, (REQ, "root.machineImages[0].versions"): 1}
    )


def _single_version(config, urn=None, image_id=None):
    config.machine_images = [
        MachineImages(name="my-image", versions=[MachineImageVersion(version="1.2.3", urn=urn, id=image_id)])
    ]
    return validate_cloud_profile_config(config, ROOT)


URN_FIELD = "root.machineImages[0].versions[0].urn"


@pytest.mark.parametrize(
    "urn, expected",
    [
        ("foo:bar:baz:ban", {}),
        ("", {(REQ, URN_FIELD): 1}),
        ("foo", {(INV, URN_FIELD): 1}),
        ("foo:bar", {(INV, URN_FIELD): 1}),
        ("foo:bar:baz", {(INV, URN_FIELD): 1}),
        ("foo:bar:baz:ban:bam", {(INV, URN_FIELD): 1}),
    ],
)
def test_machine_image_urn(config, urn, expected):
    assert kinds(_single_version(config, urn=urn)) == Counter(expected)


@pytest.mark.parametrize(
    "image_id, expected",
    [
        ("/non/empty/id", {}),
        ("", {(REQ, "root.machineImages[0].versions[0].id"): 1}),
    ],
)
def test_machine_image_id(config, image_id, expected):
    assert kinds(_single_version(config, image_id=image_id)) == Counter(expected)


VERSION_FIELD = "root.machineImages[0].versions[0]"


@pytest.mark.parametrize(
    "urn, image_id, expected",
    [
        (URN, None, {}),
        (None, IMAGE_ID, {}),
        (None, None, {(REQ, VERSION_FIELD): 1}),
        (URN, IMAGE_ID, {(REQ, VERSION_FIELD): 1}),
        (
            "",
            "",
            {
                (REQ, VERSION_FIELD): 1,
                (REQ, VERSION_FIELD + ".id"): 1,
                (REQ, VERSION_FIELD + ".urn"): 1,
            },
        ),
    ],
)
def test_image_reference_configuration(config, urn, image_id, expected):
    assert kinds(_single_version(config, urn=urn, image_id=image_id)) == Counter(expected)


def test_forbids_empty_version(config):
    config.machine_images = [MachineImages(name="abc", versions=[MachineImageVersion()])]
    assert kinds(validate_cloud_profile_config(config, ROOT)) == Counter(
        {(REQ, "root.machineImages[0].versions[0].version"): 1, (REQ, VERSION_FIELD): 1}
    )


def test_requires_fault_domain_count(config):
    config.count_fault_domains = []
    assert kinds(validate_cloud_profile_config(config, ROOT)) == Counter({(REQ, "root.countFaultDomains"): 1})


def test_forbids_bad_fault_domain_count(config):
    config.count_fault_domains = [DomainCount(region="", count=-1)]
    assert kinds(validate_cloud_profile_config(config, ROOT)) == Counter(
        {(REQ, "root.countFaultDomains[0].region"): 1, (INV, "root.countFaultDomains[0].count"): 1}
    )


def test_requires_update_domain_count(config):
    config.count_update_domains = []
    assert kinds(validate_cloud_profile_config(config, ROOT)) == Counter({(REQ, "root.countUpdateDomains"): 1})


def test_forbids_bad_update_domain_count(config):
    config.count_update_domains = [DomainCount(region="", count=-1)]
    assert kinds(validate_cloud_profile_config(config, ROOT)) == Counter(
        {(REQ, "root.countUpdateDomains[0].region"): 1, (INV, "root.countUpdateDomains[0].count"): 1}
    )