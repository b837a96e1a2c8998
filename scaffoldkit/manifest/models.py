"""Pydantic v2 models for template manifests.

Defines the immutable data model produced from a template's ``template.yaml``:
the manifest itself, its declared variables and its post-generation hooks.
Instances are only ever built by :func:`scaffoldkit.manifest.parse_manifest`,
which performs the ordered validation and error reporting.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class VariableType(str, Enum):
    """Kinds of value a template variable can hold."""
    STRING = "string"
    BOOLEAN = "boolean"
    MULTISELECT = "multiselect"


DefaultValue = Union[bool, str, tuple[str, ...]]


# ---------------------------------------------------------------------------
# Variables & Hooks
# ---------------------------------------------------------------------------

class TemplateVariable(BaseModel):
    """A variable declared by a template and collected before rendering."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., description="Variable name referenced from templates")
    description: str = Field(..., description="Prompt text shown to the user")
    type: VariableType = Field(default=VariableType.STRING, description="Value kind")
    required: Optional[bool] = Field(default=None, description="Whether a value must be given")
    default: Optional[DefaultValue] = Field(default=None, description="Value used when none is given")
    pattern: Optional[str] = Field(
        default=None,
        alias="validate",
        description="Regular expression string values must match",
    )
    options: Optional[tuple[str, ...]] = Field(
        default=None, description="Choices offered for multiselect variables"
    )

    @property
    def is_required(self) -> bool:
        return bool(self.required)


class TemplateHook(BaseModel):
    """A shell command run in the generated project after scaffolding."""
    model_config = ConfigDict(frozen=True)

    command: str = Field(..., description="Opaque shell command")
    description: str = Field(..., description="Human-readable label")


class TemplateHooks(BaseModel):
    """Hook lists keyed by lifecycle stage."""
    model_config = ConfigDict(frozen=True)

    post: tuple[TemplateHook, ...] = Field(
        default=(), description="Hooks run after files are written, in order"
    )


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

class TemplateManifest(BaseModel):
    """A validated template manifest."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Template name")
    description: str = Field(..., description="One-line template summary")
    version: str = Field(..., description="Template version string")
    variables: tuple[TemplateVariable, ...] = Field(
        default=(), description="Declared variables, in prompt order"
    )
    hooks: Optional[TemplateHooks] = Field(default=None, description="Lifecycle hooks")

    @property
    def post_hooks(self) -> tuple[TemplateHook, ...]:
        """Post-generation hooks, or an empty tuple when none are declared."""
        if self.hooks is None:
            return ()
        return self.hooks.post

    @property
    def variable_names(self) -> list[str]:
        return [v.name for v in self.variables]

    def get_variable(self, name: str) -> Optional[TemplateVariable]:
        for variable in self.variables:
            if variable.name == name:
                return variable
        return None
