"""Loading the controller configuration from YAML documents."""

from __future__ import annotations

import os
from typing import Union

import yaml

from .config import API_VERSION, GROUP_NAME, KIND, VERSION, ControllerConfiguration


class ConfigLoadError(ValueError):
    """Raised when a configuration document cannot be decoded."""


def load(data: Union[bytes, str]) -> ControllerConfiguration:
    """Decode a v1alpha1 configuration document; empty input gives the default configuration."""
    if len(data) == 0:
        return ControllerConfiguration()

    try:
        document = yaml.safe_load(data)
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"cannot parse configuration: {exc}") from exc

    if not isinstance(document, dict):
        raise ConfigLoadError("configuration must be a YAML mapping")

    api_version = document.get("apiVersion")
    doc_kind = document.get("kind") or "Config"
    if api_version is None:
        raise ConfigLoadError(f'no kind "{doc_kind}" is registered for version "{VERSION}"')
    if api_version != API_VERSION:
        raise ConfigLoadError(f'no kind "{doc_kind}" is registered for version "{api_version}"')
    if doc_kind != KIND:
        raise ConfigLoadError(f'no kind "{doc_kind}" is registered for version "{GROUP_NAME}/{VERSION}"')

    try:
        return ControllerConfiguration.from_dict(document)
    except ValueError as exc:
        raise ConfigLoadError(str(exc)) from exc


def load_from_file(filename: Union[str, os.PathLike]) -> ControllerConfiguration:
    """Read and decode a configuration file."""
    with open(filename, "rb") as handle:
        return load(handle.read())