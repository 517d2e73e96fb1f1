"""Configuration classes for strict XML parsing.

This module provides configuration objects for the tokenizer and the tree
builder together with an immutable aggregate used by the public API and CLI.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

_COMPONENTS = ("tokenization", "tree", "global_")

# One stack frame per nesting level; stays under the default recursion limit
MAX_DEPTH_LIMIT = 800


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass
class TokenizationConfig:
    """Configuration for the lexer.

    Attributes:
        strict: Raise XMLSyntaxError when input cannot be fully tokenized.
            When False the unmatched tail is dropped and reported as a
            warning diagnostic.
        max_iterations_factor: Safety bound on lexer iterations, expressed
            as a multiple of the input length.
    """

    strict: bool = True
    max_iterations_factor: int = 2

    def __post_init__(self) -> None:
        """Validate tokenization configuration."""
        if self.max_iterations_factor < 1:
            raise ValueError("max_iterations_factor must be >= 1")

    def max_iterations(self, length: int) -> int:
        """Iteration bound for an input of ``length`` characters."""
        return self.max_iterations_factor * length + 2


@dataclass
class TreeConfig:
    """Configuration for the recursive-descent tree builder."""

    max_depth: int = 500
    decode_entities: bool = True

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")
        if self.max_depth > MAX_DEPTH_LIMIT:
            raise ValueError(f"max_depth must be <= {MAX_DEPTH_LIMIT}")


@dataclass
class GlobalConfig:
    """Settings that apply across all components."""

    logging_level: str = "WARNING"

    def __post_init__(self) -> None:
        """Validate global configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging_level not in valid_levels:
            raise ValueError(f"logging_level must be one of {valid_levels}")


@dataclass(frozen=True)
class ParserConfig:
    """Complete configuration for a parse call.

    Immutable, so a single instance may be shared between threads.
    """

    tokenization: TokenizationConfig = field(default_factory=TokenizationConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the component configurations."""
        try:
            self.tokenization.__post_init__()
            self.tree.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Nested fields use a double underscore separator.

        Example:
            >>> config = ParserConfig().override(tokenization__strict=False)
            >>> config.tokenization.strict
            False
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component = next(
                    (name for name in _COMPONENTS if key.startswith(name + "__")), None
                )
                if component is None:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {key.split('__', 1)[0]}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                field_name = key[len(component) + 2:]
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for key, value in nested_overrides.items():
            if key in _COMPONENTS and isinstance(value, dict):
                try:
                    new_fields[key] = replace(getattr(self, key), **value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files
        surface instead of being ignored.
        """
        def _dict_to_dataclass(data_dict: Dict[str, Any], target_class: type) -> Any:
            if not isinstance(data_dict, dict):
                raise ConfigValidationError(
                    f"Expected a mapping for {target_class.__name__}"
                )
            known = target_class.__dataclass_fields__
            unknown = sorted(set(data_dict) - set(known))
            if unknown:
                raise ConfigValidationError(
                    f"Unknown {target_class.__name__} fields: {', '.join(unknown)}",
                    field_name=unknown[0],
                    suggestions=sorted(known),
                )

            field_values: Dict[str, Any] = {}
            for field_name, field_info in known.items():
                if field_name not in data_dict:
                    continue
                value = data_dict[field_name]
                if hasattr(field_info.type, "__dataclass_fields__"):
                    field_values[field_name] = _dict_to_dataclass(value, field_info.type)
                else:
                    field_values[field_name] = value

            try:
                return target_class(**field_values)
            except ValueError as e:
                raise ConfigValidationError(str(e)) from e

        result = _dict_to_dataclass(data, cls)
        if not isinstance(result, cls):
            raise ConfigValidationError(f"Failed to deserialize to {cls.__name__}")
        return result

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def strict(cls) -> "ParserConfig":
        """Reject any input that cannot be tokenized completely (default)."""
        return cls(name="strict")

    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Drop untokenizable trailing input instead of failing."""
        return cls(tokenization=TokenizationConfig(strict=False), name="lenient")
