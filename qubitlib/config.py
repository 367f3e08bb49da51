"""Parser options and their YAML configuration file.

A configuration file is a small YAML mapping, for example::

    max_depth: 32
    filename: rules.qb

It is validated against :data:`OPTIONS_SCHEMA` before use.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64

# Each nesting level costs several Python stack frames in the parser, so the
# limit stays well below the interpreter's recursion limit.
MAX_ALLOWED_DEPTH = 100

OPTIONS_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Qubit parser options",
    "type": "object",
    "properties": {
        "max_depth": {"type": "integer", "minimum": 1, "maximum": MAX_ALLOWED_DEPTH},
        "filename": {"type": "string", "minLength": 1},
    },
    "additionalProperties": False,
}


class ConfigError(Exception):
    """Raised when a configuration file cannot be loaded or is invalid."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


@dataclass(frozen=True)
class ParserOptions:
    """Tunable limits for a parse run."""

    max_depth: int = DEFAULT_MAX_DEPTH
    filename: str = "<string>"

    @classmethod
    def from_mapping(cls, data: dict[str, Any] | None, path: Path | None = None) -> ParserOptions:
        """Validate *data* against the options schema and build options from it."""
        if data is None:
            data = {}
        try:
            jsonschema.validate(instance=data, schema=OPTIONS_SCHEMA)
        except jsonschema.ValidationError as e:
            where = " -> ".join(str(p) for p in e.path)
            message = f"{e.message} (at {where})" if where else e.message
            raise ConfigError(message, path) from e
        return cls(**data)


def load_options(path: str | Path) -> ParserOptions:
    """Load :class:`ParserOptions` from a YAML file.

    Raises:
        ConfigError: If the file is missing or unreadable, is not valid
            UTF-8 YAML, or does not match the options schema.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError("file not found", path) from e
    except OSError as e:
        raise ConfigError(f"cannot read file: {e.strerror or e}", path) from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"not valid UTF-8: {e.reason}", path) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML: {e}", path) from e

    options = ParserOptions.from_mapping(data, path)
    logger.debug("loaded parser options from %s: %s", path, options)
    return options
