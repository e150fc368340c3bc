#!/usr/bin/env python3
"""
Formula Configuration

The formula configuration is the YAML file a user analyzes:

    formula: ((a * b)**(e/f)) / (c * d)
    round_up: true
    less_than_one:
    - a
    greater_than_one:
    - (a * b)

The two classification lists are optional; they hold the canonical text of
sub-expressions already known to be < 1 or >= 1 so the analyzer does not
ask about them again.
"""

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from roundme.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config.yaml"
DEFAULT_FORMULA = "((a * b)**(e/f)) / (c * d)"
SAMPLE_HINT = '# less_than_one: ["a", "b"] -- replace this if needed\n'


@dataclass
class FormulaConfig:
    """Formula to analyze and what is known about its sub-expressions."""

    formula: str
    # Whether the whole formula must round up (True) or down (False)
    round_up: bool
    less_than_one: Optional[List[str]] = None
    greater_than_one: Optional[List[str]] = None

    @classmethod
    def default(cls) -> "FormulaConfig":
        return cls(formula=DEFAULT_FORMULA, round_up=True)

    def add_less_than_one(self, value: str) -> None:
        if self.less_than_one is None:
            self.less_than_one = []
        if value not in self.less_than_one:
            self.less_than_one.append(value)

    def add_greater_than_one(self, value: str) -> None:
        if self.greater_than_one is None:
            self.greater_than_one = []
        if value not in self.greater_than_one:
            self.greater_than_one.append(value)

    def to_dict(self) -> Dict[str, Any]:
        # Absent lists stay absent in the file
        return {key: value for key, value in asdict(self).items() if value is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormulaConfig":
        if not isinstance(data, dict):
            raise ConfigError("Formula config must be a YAML mapping")

        for key in data:
            if key not in cls.__dataclass_fields__:
                logger.warning(f"Ignoring unknown formula config key '{key}'")

        formula = data.get('formula')
        if not isinstance(formula, str) or not formula.strip():
            raise ConfigError("Formula config requires a non-empty 'formula' string")

        round_up = data.get('round_up')
        if not isinstance(round_up, bool):
            raise ConfigError("Formula config requires a boolean 'round_up'")

        return cls(
            formula=formula,
            round_up=round_up,
            less_than_one=_string_list(data, 'less_than_one'),
            greater_than_one=_string_list(data, 'greater_than_one'),
        )


def _string_list(data: Dict[str, Any], key: str) -> Optional[List[str]]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a list of expressions")
    return [str(item) for item in value]


def to_yaml_str(formula_config: FormulaConfig) -> str:
    try:
        return yaml.safe_dump(
            formula_config.to_dict(),
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to serialize formula config: {e}")


def from_yaml_str(contents: str) -> FormulaConfig:
    try:
        data = yaml.safe_load(contents)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML: {e}")
    return FormulaConfig.from_dict(data)


class FormulaConfigManager:
    """Creates, loads, saves and deletes one formula config file."""

    def __init__(self, config_file: Union[str, Path] = DEFAULT_CONFIG_FILE):
        self.config_file = Path(config_file).expanduser()

    def exists(self) -> bool:
        return self.config_file.exists()

    def load_config(self) -> FormulaConfig:
        """Load the formula config from file."""
        try:
            contents = self.config_file.read_text(encoding='utf-8')
        except OSError as e:
            raise ConfigError(f"Failed to open file {self.config_file}: {e}")

        formula_config = from_yaml_str(contents)
        logger.debug(f"Loaded formula config from {self.config_file}")
        return formula_config

    def save_config(self, formula_config: FormulaConfig, overwrite: bool = False) -> None:
        """Write the formula config to file, refusing to replace an existing one unless asked."""
        self._write(to_yaml_str(formula_config), overwrite)

    def init_sample(self, overwrite: bool = False) -> FormulaConfig:
        """Write the default sample config, with a commented hint for the classification lists."""
        formula_config = FormulaConfig.default()
        self._write(to_yaml_str(formula_config) + SAMPLE_HINT, overwrite)
        return formula_config

    def clean(self) -> bool:
        """Delete the config file. Returns False when there was nothing to delete."""
        if not self.config_file.exists():
            return False
        try:
            self.config_file.unlink()
        except OSError as e:
            raise ConfigError(f"Failed to delete file {self.config_file}: {e}")
        logger.info(f"Deleted the formula config file {self.config_file}")
        return True

    def _write(self, contents: str, overwrite: bool) -> None:
        if not overwrite and self.config_file.exists():
            raise ConfigError(
                f"Config file '{self.config_file}' already exists. Consider using another path"
            )
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            self.config_file.write_text(contents, encoding='utf-8')
        except OSError as e:
            raise ConfigError(f"Failed to write file {self.config_file}: {e}")
        logger.info(f"Generated the formula config file {self.config_file}")
