"""Configuration management for the commitment engine."""

from .config import (
    SystemConfig,
    ProtocolConfig,
    BenchmarkConfig,
    load_config,
    save_config,
    config_from_dict,
    config_to_dict,
)

__all__ = [
    'SystemConfig',
    'ProtocolConfig',
    'BenchmarkConfig',
    'load_config',
    'save_config',
    'config_from_dict',
    'config_to_dict',
]
