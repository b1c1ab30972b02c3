# azureshootcheck

Validation rules for the Azure provider configuration of shoot clusters, and a
loader for the provider controller's configuration file.

Validators take plain dataclass objects (from `azureshootcheck.api`) and a
`FieldPath`. They return a list of `FieldError` values rather than raising on
invalid input. Each error carries an `ErrorType` (for example `REQUIRED`,
`INVALID`, `FORBIDDEN`, `NOT_SUPPORTED`, `TOO_MANY`), the rendered field path in
`field`, the offending value in `bad_value` and a message in `detail`.
`str(error)` gives a one-line description. An empty list means the
configuration passed every check.

Passing `None` as the path is accepted; paths are then rooted at the empty
`FieldPath()`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Validating an infrastructure configuration

```python
from azureshootcheck.api import InfrastructureConfig, NetworkConfig, VNet
from azureshootcheck.errors import FieldPath
from azureshootcheck.infrastructure import validate_infrastructure_config

infra = InfrastructureConfig(
    networks=NetworkConfig(workers="10.250.3.0/24", vnet=VNet(cidr="10.0.0.0/8")),
)
errors = validate_infrastructure_config(
    infra,
    "10.250.0.0/16",   # nodes CIDR
    "100.96.0.0/11",   # pods CIDR
    "100.64.0.0/13",   # services CIDR
    False,             # whether the shoot carries the VMO alpha annotation
    FieldPath(),
)
for error in errors:
    print(error)
```

Other functions in `azureshootcheck.infrastructure`:

- `validate_infrastructure_config_update(old_config, new_config, path)` checks a
  change against the previous configuration: immutable resource group, workers
  CIDR, `zoned` flag and VNet reference, and the allowed transitions between the
  single-subnet and per-zone subnet layouts.
- `validate_infrastructure_config_against_cloud_profile(old_infra, infra, shoot_region, regions, path)`
  checks that per-zone subnets name zones present in the shoot's region, given
  as a list of `Region` objects. Zones that were already in `old_infra` are
  accepted even if the region no longer lists them.
- `validate_vmo_config_update(old_has_annotation, new_has_annotation, path)`
  forbids adding or removing the VMO annotation on an existing shoot.

## Other validators

- `azureshootcheck.cloudprofile.validate_cloud_profile_config(cloud_profile, path)`:
  machine images (each version needs exactly one of a URN in
  `Publisher:Offer:Sku:Version` form or an image ID) and fault/update domain
  counts.
- `azureshootcheck.shoot.validate_networking(networking, path)`: requires a
  nodes CIDR.
- `azureshootcheck.shoot.validate_workers(workers, infra, path)`: worker volume
  type and size, at most 64 data volumes, no `encrypted` setting, zones required
  for zoned clusters and forbidden otherwise, no duplicate zones, and zones that
  match the infrastructure's per-zone subnets.
- `azureshootcheck.shoot.validate_workers_update(old_workers, new_workers, path)`:
  zones of an existing worker group may only be extended at the end, never
  removed or reordered (see `should_enforce_immutability`).
- `azureshootcheck.cidr`: the `CIDR` class with `validate_parse`,
  `validate_subset` and `validate_not_overlap`, plus `validate_cidr_parse`,
  `validate_cidr_is_canonical` and `validate_cidr_overlap`.
- `azureshootcheck.errors`: `FieldPath` (built with `child` and `index`), the
  error constructors `required`, `invalid`, `forbidden`, `not_supported`,
  `too_many`, and `validate_immutable_field`.

## Controller configuration

```python
from azureshootcheck.loader import ConfigLoadError, load_from_file

try:
    config = load_from_file("componentconfig.yaml")
except ConfigLoadError as exc:
    raise SystemExit(f"bad configuration: {exc}")

print(config.etcd.storage.class_name, config.etcd.backup.schedule)
```

`load` takes the YAML content as bytes or text; empty input gives a default
`ControllerConfiguration`. The document must have
`apiVersion: azure.provider.extensions.config.gardener.cloud/v1alpha1` and
`kind: ControllerConfiguration`; anything else, malformed YAML, or fields of the
wrong type raise `ConfigLoadError`. Unknown keys are ignored. The etcd storage
`capacity` must be a Kubernetes-style quantity such as `25Gi`.

`ControllerConfiguration.from_dict` and `to_dict` convert to and from the
document form. `azureshootcheck.config.kind` and `resource` qualify a name with
the configuration's API group.

## What this package does not do

It only checks configuration objects and reads the controller configuration.
It has no command-line tool, does not talk to Kubernetes or Azure, does not
create or reconcile any infrastructure, and does not serve admission webhooks.
Feature-gate checks for the cloud controller manager and validation of the
cloud provider credentials secret are not included.