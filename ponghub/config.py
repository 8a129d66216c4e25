"""Loading the YAML configuration."""

from __future__ import annotations

import os

import yaml

from ponghub.defaults import default_max_log_days, default_retry, default_timeout
from ponghub.models import Config


class ConfigError(Exception):
    """The configuration file cannot be used."""


def set_default_fields(cfg: Config) -> Config:
    """Fill unset or non-positive settings with their defaults, in place."""
    cfg.timeout = default_timeout(cfg.timeout)
    cfg.retry = default_retry(cfg.retry)
    cfg.max_log_days = default_max_log_days(cfg.max_log_days)
    for service in cfg.services:
        service.timeout = default_timeout(service.timeout)
        service.retry = default_retry(service.retry)
    return cfg


def load_config(path: str | os.PathLike[str]) -> Config:
    """Read, validate and complete the configuration at path.

    Raises OSError if the file cannot be opened and ConfigError if its
    contents are invalid or define no services.
    """
    with open(path, encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to decode YAML config: {exc}") from exc

    if data is None:
        raise ConfigError("Failed to decode YAML config: empty document")
    try:
        cfg = Config.from_dict(data)
    except ValueError as exc:
        raise ConfigError(f"Failed to decode YAML config: {exc}") from exc

    set_default_fields(cfg)

    if not cfg.services:
        raise ConfigError("No services defined in the configuration file")
    return cfg