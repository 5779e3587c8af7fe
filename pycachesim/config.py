from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Optional
import yaml
from pathlib import Path

from .errors import ConfigurationError
from .utils.logging import get_logger

ADDRESS_WIDTH = 64

logger = get_logger(__name__)


@dataclass(frozen=True)
class CacheGeometry:
    """Validated (s, E, b) triple describing the simulated cache."""
    set_index_bits: int
    lines_per_set: int
    block_offset_bits: int

    def __post_init__(self):
        for name in ("set_index_bits", "lines_per_set", "block_offset_bits"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}.")
        if self.set_index_bits < 0:
            raise ConfigurationError("Set index bits must be non-negative.")
        if self.block_offset_bits < 0:
            raise ConfigurationError("Block offset bits must be non-negative.")
        if self.lines_per_set < 1:
            raise ConfigurationError("Lines per set must be at least 1.")
        if self.set_index_bits + self.block_offset_bits > ADDRESS_WIDTH:
            raise ConfigurationError(
                f"Set index bits + block offset bits ({self.set_index_bits + self.block_offset_bits}) "
                f"exceed the {ADDRESS_WIDTH}-bit address width."
            )

    @property
    def num_sets(self) -> int:
        return 1 << self.set_index_bits

    @property
    def block_size_bytes(self) -> int:
        return 1 << self.block_offset_bits


@dataclass
class SimConfig:
    """Cache simulator run configuration."""
    # Cache geometry (defaults match the classic csim command line)
    set_index_bits: int = 1
    lines_per_set: int = 1
    block_offset_bits: int = 1

    # Trace input
    trace_file: str = ""
    verbose: bool = False

    replacement_policy: str = "lru"

    # Config file
    config_file: str = ""

    # Reporting; no report is written when unset
    report_dir: Optional[str] = None

    @property
    def geometry(self) -> CacheGeometry:
        """Builds the immutable geometry, raising ConfigurationError if invalid."""
        return CacheGeometry(
            set_index_bits=self.set_index_bits,
            lines_per_set=self.lines_per_set,
            block_offset_bits=self.block_offset_bits,
        )

    def update_from_yaml(self, yaml_path: str):
        """Updates config fields from a YAML file."""
        with open(yaml_path, 'r') as f:
            try:
                yaml_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Config file {yaml_path} is not valid YAML: {e}") from e
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(f"Config file {yaml_path} must contain a mapping.")
        field_names = {f.name for f in fields(self)}
        for key, value in yaml_config.items():
            if key in field_names:
                setattr(self, key, value)
            else:
                logger.warning("Ignoring unknown config key '%s' in %s", key, yaml_path)

    @classmethod
    def from_args(cls, args) -> SimConfig:
        """Factory method to create a SimConfig from parsed argparse arguments."""
        config = cls()

        # 1. Load from YAML config file if provided
        if hasattr(args, 'config') and args.config:
            config.config_file = args.config
            if Path(config.config_file).exists():
                config.update_from_yaml(config.config_file)
            else:
                logger.warning("Config file %s not found.", config.config_file)

        # 2. Override with command-line arguments
        arg_dict = vars(args)
        field_names = {f.name for f in fields(config)}
        for key, value in arg_dict.items():
            if value is not None and key in field_names:
                setattr(config, key, value)

        return config
