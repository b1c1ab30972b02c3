"""Validators for Azure shoot provider configuration and a loader for the controller configuration."""

__version__ = "0.1.0"