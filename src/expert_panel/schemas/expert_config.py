"""Pydantic models for panel files.

Raw YAML panel definitions are validated here before being turned into
immutable ``ExpertDescriptor`` values.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ExpertConfig(BaseModel):
    """Config for one expert in a panel file."""

    model_config = ConfigDict(extra="forbid")

    name: str
    instructions: str

    @model_validator(mode="before")
    @classmethod
    def accept_system_prompt_alias(cls, data: Any) -> Any:
        """Allow ``system_prompt`` as a synonym for ``instructions``."""
        if isinstance(data, dict) and "system_prompt" in data:
            if "instructions" in data:
                msg = "instructions and system_prompt are mutually exclusive"
                raise ValueError(msg)
            data = dict(data)
            data["instructions"] = data.pop("system_prompt")
        return data

    @field_validator("name", "instructions")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


class PanelFileConfig(BaseModel):
    """Top-level shape of a panel YAML file."""

    model_config = ConfigDict(extra="forbid")

    name: str
    description: str = ""
    default_question: str | None = None
    experts: list[ExpertConfig] = Field(min_length=1)

    @model_validator(mode="after")
    def validate_unique_names(self) -> "PanelFileConfig":
        """Expert names must be unique within a panel file."""
        seen: set[str] = set()
        for expert in self.experts:
            if expert.name in seen:
                msg = f"Duplicate expert name in panel '{self.name}': {expert.name}"
                raise ValueError(msg)
            seen.add(expert.name)
        return self


def parse_panel_file(data: dict[str, Any]) -> PanelFileConfig:
    """Parse a raw dict loaded from YAML into a ``PanelFileConfig``."""
    return PanelFileConfig(**data)
