"""Configuration models and loaders."""

from .config import (
    CompiledPatterns,
    Config,
    MonitoringConfig,
    PatternSet,
    ReadabilityConfig,
    find_config_file,
    load_config,
)

__all__ = [
    "CompiledPatterns",
    "Config",
    "MonitoringConfig",
    "PatternSet",
    "ReadabilityConfig",
    "find_config_file",
    "load_config",
]
