"""
Configuration loader for the difference engine

Reads engine policies from a YAML file, validates it against
engine.schema.json and installs the named controller, evaluators and
namespace context on a DifferenceEngine.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema
import yaml

from src.diff.controllers import CONTROLLERS
from src.diff.evaluators import EVALUATORS, chain
from src.utils.logger import get_logger, log_operation

logger = get_logger(__name__)


class ConfigurationError(Exception):
    """Exception raised for configuration-related errors."""

    pass


# Path of the YAML configuration; unset means built-in defaults
ENGINE_CONFIG_FILE = os.getenv("XMLDIFF_CONFIG_FILE")
ENGINE_SCHEMA_FILE = Path(__file__).with_name("engine.schema.json")


def _load_schema(schema_path: Path) -> Dict[str, Any]:
    try:
        with open(schema_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        logger.error(
            "Engine schema file not found",
            operation="load_schema",
            context={"path": str(schema_path)},
        )
        raise ConfigurationError(f"Engine schema file not found: {schema_path}") from e
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in engine schema", operation="load_schema", error=str(e))
        raise ConfigurationError(f"Invalid JSON in {schema_path}: {e}") from e


@dataclass
class EngineSettings:
    """
    Policies of a difference engine, by name.

    Attributes:
        comparison_controller: Key of src.diff.controllers.CONTROLLERS
        difference_evaluators: Keys of src.diff.evaluators.EVALUATORS, chained in order
        namespace_context: Namespace URI to prefix mapping
    """

    comparison_controller: str = "default"
    difference_evaluators: List[str] = field(default_factory=lambda: ["default"])
    namespace_context: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineSettings":
        settings = cls(
            comparison_controller=data.get("comparison_controller", "default"),
            difference_evaluators=list(data.get("difference_evaluators", ["default"])),
            namespace_context=dict(data.get("namespace_context", {})),
        )
        settings.validate_names()
        return settings

    @classmethod
    @log_operation("load_engine_settings")
    def load(
        cls, path: Optional[str] = None, schema_path: Path = ENGINE_SCHEMA_FILE
    ) -> "EngineSettings":
        """
        Load settings from YAML and validate them against the schema.

        Args:
            path: YAML file; falls back to XMLDIFF_CONFIG_FILE, then defaults
            schema_path: JSON schema the configuration must satisfy

        Returns:
            EngineSettings instance

        Raises:
            ConfigurationError: If the file is missing, malformed, fails
                schema validation or names unknown policies
        """
        config_path = path or ENGINE_CONFIG_FILE
        if not config_path:
            logger.info("No engine configuration file given, using defaults", operation="load_engine_settings")
            return cls()

        schema = _load_schema(schema_path)

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except FileNotFoundError as e:
            logger.error(
                "Engine configuration file not found",
                operation="load_engine_settings",
                context={"path": str(config_path)},
            )
            raise ConfigurationError(f"Engine configuration file not found: {config_path}") from e
        except yaml.YAMLError as e:
            logger.error(
                "Invalid YAML in engine configuration",
                operation="load_engine_settings",
                context={"path": str(config_path)},
                error=str(e),
            )
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not config:
            logger.warning(
                "Empty engine configuration, using defaults",
                operation="load_engine_settings",
                context={"path": str(config_path)},
            )
            return cls()

        try:
            jsonschema.validate(instance=config, schema=schema)
        except jsonschema.ValidationError as e:
            logger.error(
                "Engine configuration failed schema validation",
                operation="load_engine_settings",
                context={"path": str(config_path)},
                error=e.message,
            )
            raise ConfigurationError(f"Engine configuration validation failed: {e.message}") from e
        except jsonschema.SchemaError as e:
            logger.error("Engine schema is invalid", operation="load_engine_settings", error=e.message)
            raise ConfigurationError(f"Engine schema is invalid: {e.message}") from e

        settings = cls.from_dict(config)
        logger.info(
            "Loaded engine configuration",
            operation="load_engine_settings",
            context={
                "path": str(config_path),
                "controller": settings.comparison_controller,
                "evaluators": settings.difference_evaluators,
                "namespaces": len(settings.namespace_context),
            },
        )
        return settings

    def validate_names(self) -> None:
        """
        Raises:
            ConfigurationError: If a controller or evaluator name is unknown
        """
        if self.comparison_controller not in CONTROLLERS:
            raise ConfigurationError(
                f"Unknown comparison controller '{self.comparison_controller}', "
                f"expected one of {sorted(CONTROLLERS)}"
            )
        for name in self.difference_evaluators:
            if name not in EVALUATORS:
                raise ConfigurationError(
                    f"Unknown difference evaluator '{name}', expected one of {sorted(EVALUATORS)}"
                )

    def apply(self, engine: Any) -> None:
        """
        Install these policies on a DifferenceEngine.

        Args:
            engine: DifferenceEngine (or anything with the same setters)
        """
        self.validate_names()

        evaluators = [EVALUATORS[name] for name in self.difference_evaluators]
        evaluator = evaluators[0] if len(evaluators) == 1 else chain(*evaluators)

        engine.set_comparison_controller(CONTROLLERS[self.comparison_controller])
        engine.set_difference_evaluator(evaluator)
        engine.set_namespace_context(self.namespace_context)

        logger.debug(
            "Applied engine settings",
            operation="apply_engine_settings",
            context={
                "controller": self.comparison_controller,
                "evaluators": self.difference_evaluators,
            },
        )


def configure_engine(engine: Any, path: Optional[str] = None) -> EngineSettings:
    """Load settings (see EngineSettings.load) and apply them to engine."""
    settings = EngineSettings.load(path=path)
    settings.apply(engine)
    return settings
