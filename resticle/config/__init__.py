"""
resticle configuration.

- schemas: pydantic models for definitions kept as data and for settings
- settings: environment-driven FactorySettings
- loaders: JSON/YAML definition files
"""

from .loaders import FileDefinitionLoader, parse_definitions
from .schemas import ActionDefinitionModel, FactorySettings, ResourceDefinitionModel
from .settings import get_settings, load_settings

__all__ = [
    "ActionDefinitionModel",
    "ResourceDefinitionModel",
    "FactorySettings",
    "get_settings",
    "load_settings",
    "FileDefinitionLoader",
    "parse_definitions",
]
