"""
Definition Loaders.

Read resource definitions kept as data instead of code. Each file holds a
mapping of resource name to definition:

    # resources.yaml
    users:
      path: /users/:id
      params: {id: "@id"}
      actions:
        search: {method: GET, path: /search, is_array: true}
    sessions:
      path: /sessions
      defaults: false
      actions:
        refresh: {method: POST, path: /refresh}

Usage:
    loader = FileDefinitionLoader("config/resources")
    definitions = loader.load_all()

    # Bind loaded definitions to resource types
    loader.register_all({"users": Users, "orders": Orders})
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from resticle.core.definitions import ResourceDefinition
from resticle.core.exceptions import ConfigurationError
from resticle.core.registry import ResourceRegistry, get_resource_registry

from .schemas import ResourceDefinitionModel

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".json", ".yaml", ".yml")


def parse_definitions(data: Any, *, source: str = "<data>") -> dict[str, ResourceDefinition]:
    """
    Validate a ``{name: definition}`` mapping.

    Raises:
        ConfigurationError: If the data is not a mapping or a definition is invalid
    """
    if not isinstance(data, Mapping):
        raise ConfigurationError(
            f"{source}: expected a mapping of resource name to definition, "
            f"got {type(data).__name__}"
        )

    definitions: dict[str, ResourceDefinition] = {}
    for name, raw in data.items():
        try:
            model = ResourceDefinitionModel.model_validate(raw)
        except ValidationError as e:
            raise ConfigurationError(f"{source}: invalid resource '{name}': {e}") from e
        definitions[str(name)] = model.to_definition()
    return definitions


class FileDefinitionLoader:
    """
    Loads resource definitions from JSON/YAML files.

    Args:
        base_dir: Directory holding definition files; ``load()`` also
            accepts paths relative to it
    """

    def __init__(self, base_dir: str | Path = "."):
        self._base_dir = Path(base_dir)

    def load(self, path: str | Path) -> dict[str, ResourceDefinition]:
        """
        Load one definition file.

        Raises:
            ConfigurationError: Missing file, unsupported suffix, or invalid content
        """
        file = Path(path)
        if not file.is_absolute() and not file.exists():
            file = self._base_dir / file

        if not file.exists():
            raise ConfigurationError(f"Definition file not found: {file}")
        if file.suffix.lower() not in SUPPORTED_SUFFIXES:
            raise ConfigurationError(
                f"Unsupported definition file {file.name}; "
                f"expected one of {', '.join(SUPPORTED_SUFFIXES)}"
            )

        definitions = parse_definitions(self._read(file), source=str(file))
        logger.info(f"[file_loader] Loaded {len(definitions)} resources from {file}")
        return definitions

    def load_all(self) -> dict[str, ResourceDefinition]:
        """
        Load every supported file in ``base_dir``, in filename order.

        A name defined in several files takes the definition from the last one.
        """
        if not self._base_dir.is_dir():
            logger.warning(f"[file_loader] Definition directory not found: {self._base_dir}")
            return {}

        definitions: dict[str, ResourceDefinition] = {}
        for file in sorted(self._base_dir.iterdir()):
            if file.is_file() and file.suffix.lower() in SUPPORTED_SUFFIXES:
                for name, definition in self.load(file).items():
                    if name in definitions:
                        logger.warning(f"[file_loader] {file.name} overrides '{name}'")
                    definitions[name] = definition
        return definitions

    def register_all(
        self,
        types: Mapping[str, type],
        registry: ResourceRegistry | None = None,
    ) -> list[type]:
        """
        Register loaded definitions for the given resource types.

        Args:
            types: Resource name (as used in the files) to resource class
            registry: Target registry (defaults to the global one)

        Returns:
            The resource types that were registered

        Raises:
            ConfigurationError: If a requested name has no definition
        """
        registry = registry or get_resource_registry()
        definitions = self.load_all()

        missing = [name for name in types if name not in definitions]
        if missing:
            raise ConfigurationError(
                f"No definition found for: {', '.join(missing)}. "
                f"Loaded: {', '.join(definitions) or '(none)'}"
            )

        for name, resource_type in types.items():
            registry.register(resource_type, definitions[name])
        return list(types.values())

    @staticmethod
    def _read(file: Path) -> Any:
        try:
            with open(file, encoding="utf-8") as f:
                if file.suffix.lower() == ".json":
                    return json.load(f)
                return yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to parse {file}: {e}") from e
