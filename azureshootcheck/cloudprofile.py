"""Validation of the provider section of a cloud profile."""

from __future__ import annotations

from .api import CloudProfileConfig, DomainCount
from .errors import FieldError, FieldPath, invalid, required


def validate_cloud_profile_config(cloud_profile: CloudProfileConfig, path: FieldPath | None) -> list[FieldError]:
    """Validate domain counts and machine image references of a cloud profile."""
    path = FieldPath() if path is None else path
    errors: list[FieldError] = []

    errors += _validate_domain_count(cloud_profile.count_fault_domains, path.child("countFaultDomains"))
    errors += _validate_domain_count(cloud_profile.count_update_domains, path.child("countUpdateDomains"))

    images_path = path.child("machineImages")
    if not cloud_profile.machine_images:
        errors.append(required(images_path, "must provide at least one machine image"))

    for i, image in enumerate(cloud_profile.machine_images):
        image_path = images_path.index(i)
        if not image.name:
            errors.append(required(image_path.child("name"), "must provide a name"))
        if not image.versions:
            errors.append(
                required(
                    image_path.child("versions"),
                    f'must provide at least one version for machine image "{image.name}"',
                )
            )
        for j, version in enumerate(image.versions):
            version_path = image_path.child("versions").index(j)
            if not version.version:
                errors.append(required(version_path.child("version"), "must provide a version"))
            if (version.urn is None) == (version.id is None):
                errors.append(required(version_path, "must provide either urn or id"))
            if version.urn is not None:
                if not version.urn:
                    errors.append(required(version_path.child("urn"), "urn cannot be empty when defined"))
                elif len(version.urn.split(":")) != 4:
                    errors.append(
                        invalid(
                            version_path.child("urn"),
                            version.urn,
                            "please use the format `Publisher:Offer:Sku:Version` for the urn",
                        )
                    )
            if version.id is not None and not version.id:
                errors.append(required(version_path.child("id"), "id cannot be empty when defined"))

    return errors


def _validate_domain_count(counts: list[DomainCount], path: FieldPath) -> list[FieldError]:
    errors: list[FieldError] = []
    if not counts:
        errors.append(required(path, "must provide at least one domain count"))
    for i, count in enumerate(counts):
        item_path = path.index(i)
        if not count.region:
            errors.append(required(item_path.child("region"), "must provide a region"))
        if count.count < 0:
            errors.append(invalid(item_path.child("count"), count.count, "count must not be negative"))
    return errors