"""
Configuration Schemas for resticle.

Pydantic models for resource definitions kept as data (JSON/YAML files,
databases) and for factory settings. Models validate the raw data and
convert it into the frozen core definitions with ``to_definition()``.

Example:
    model = ResourceDefinitionModel.model_validate({
        "path": "/users/:id",
        "params": {"id": "@id"},
        "actions": {
            "search": {"method": "get", "path": "/search", "is_array": True},
        },
    })
    definition = model.to_definition()
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from resticle.core.definitions import ActionDefinition, HttpMethod, ResourceDefinition


class ActionDefinitionModel(BaseModel):
    """Serialized form of an ActionDefinition."""

    model_config = ConfigDict(extra="forbid")

    method: HttpMethod = Field(default=HttpMethod.GET, description="HTTP method")
    path: str = Field(default="", description="Suffix appended to the resource path")
    params: dict[str, Any] = Field(default_factory=dict, description="Default parameters")
    is_array: bool = Field(default=False, description="Response must be a list")
    transform: bool | None = Field(default=None, description="Apply item transform")
    has_body: bool | None = Field(default=None, description="First argument is the body")

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    def to_definition(self) -> ActionDefinition:
        return ActionDefinition(
            method=self.method,
            path=self.path,
            params=self.params,
            is_array=self.is_array,
            transform=self.transform,
            has_body=self.has_body,
        )


class ResourceDefinitionModel(BaseModel):
    """Serialized form of a ResourceDefinition."""

    model_config = ConfigDict(extra="forbid")

    path: str = Field(..., description="Path template, e.g. /users/:id")
    params: dict[str, Any] = Field(default_factory=dict, description="Shared parameters")
    actions: dict[str, ActionDefinitionModel] = Field(default_factory=dict)
    defaults: bool = Field(default=True, description="Bind create/update/delete/get/list")

    def to_definition(self) -> ResourceDefinition:
        return ResourceDefinition(
            path=self.path,
            params=self.params,
            actions={name: a.to_definition() for name, a in self.actions.items()},
            defaults=self.defaults,
        )


class FactorySettings(BaseModel):
    """
    ResourceFactory settings.

    Populated from the environment by ``resticle.config.get_settings()``.
    """

    model_config = ConfigDict(extra="ignore")

    root_path: str = Field(default="", description="Prefix for every request path")
    default_headers: dict[str, str] = Field(
        default_factory=dict, description="Headers sent with every request"
    )
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
