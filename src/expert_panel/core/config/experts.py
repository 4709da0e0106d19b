"""Expert descriptors and panel configuration loading."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from pydantic import ValidationError

from expert_panel.exceptions import ConfigurationError
from expert_panel.schemas.expert_config import parse_panel_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpertDescriptor:
    """Names a persona and the instructions that shape its answers."""

    name: str
    instructions: str

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Expert name must not be empty")
        if not self.instructions or not self.instructions.strip():
            raise ValueError(f"Expert '{self.name}' has empty instructions")


@dataclass
class PanelConfig:
    """An ordered set of experts answering the same question."""

    name: str
    description: str
    experts: list[ExpertDescriptor] = field(default_factory=list)
    default_question: str | None = None
    relative_path: str | None = None  # For hierarchical display


PHYSICS_EXPERT = ExpertDescriptor(
    name="Physics Expert",
    instructions=(
        "You are an expert physicist. Answer questions from a physics "
        "perspective, focusing on physical laws, properties, energy, matter, "
        "and scientific principles."
    ),
)

CHEMISTRY_EXPERT = ExpertDescriptor(
    name="Chemistry Expert",
    instructions=(
        "You are an expert chemist. Answer questions from a chemistry "
        "perspective, focusing on molecular structure, chemical bonds, "
        "reactions, and chemical properties."
    ),
)

DEFAULT_PANEL = PanelConfig(
    name="science",
    description="Physics and chemistry experts answering side by side",
    experts=[PHYSICS_EXPERT, CHEMISTRY_EXPERT],
    default_question="What is temperature?",
)


def assert_unique_names(experts: Iterable[ExpertDescriptor]) -> None:
    """Raise ValueError if two experts share a name.

    The dispatcher accepts duplicates; callers that need uniqueness
    enforce it here before dispatching.
    """
    seen: set[str] = set()
    for expert in experts:
        if expert.name in seen:
            raise ValueError(f"Duplicate expert name: {expert.name}")
        seen.add(expert.name)


def panel_to_dict(panel: PanelConfig) -> dict[str, object]:
    """Serialize a panel to the YAML file shape."""
    data: dict[str, object] = {
        "name": panel.name,
        "description": panel.description,
    }
    if panel.default_question:
        data["default_question"] = panel.default_question
    data["experts"] = [
        {"name": expert.name, "instructions": expert.instructions}
        for expert in panel.experts
    ]
    return data


class PanelLoader:
    """Loads panel configurations from YAML files."""

    def load_from_file(self, file_path: str) -> PanelConfig:
        """Load a panel configuration from a YAML file."""
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Panel file not found: {file_path}")

        with open(path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Failed to parse panel file {file_path}: {e}"
                ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Panel file {file_path} is not a mapping")

        try:
            parsed = parse_panel_file(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid panel file {file_path}: {e}") from e

        return PanelConfig(
            name=parsed.name,
            description=parsed.description,
            experts=[
                ExpertDescriptor(name=expert.name, instructions=expert.instructions)
                for expert in parsed.experts
            ],
            default_question=parsed.default_question,
        )

    def list_panels(self, directory: str) -> list[PanelConfig]:
        """List all panel configurations in a directory and subdirectories."""
        dir_path = Path(directory)
        if not dir_path.exists():
            return []

        panels = []
        panel_files = sorted([*dir_path.rglob("*.yaml"), *dir_path.rglob("*.yml")])
        for panel_file in panel_files:
            try:
                config = self.load_from_file(str(panel_file))
            except (ConfigurationError, OSError) as e:
                logger.warning("Skipping invalid panel file %s: %s", panel_file, e)
                continue

            relative_path = panel_file.relative_to(dir_path)
            config.relative_path = (
                str(relative_path.parent) if relative_path.parent != Path(".") else None
            )
            panels.append(config)

        return panels

    def find_panel(self, directory: str, name: str) -> PanelConfig | None:
        """Find a panel by name in a directory.

        Matches the plain panel name or the hierarchical
        ``<relative_path>/<name>`` form.
        """
        for panel in self.list_panels(directory):
            display_name = (
                f"{panel.relative_path}/{panel.name}"
                if panel.relative_path
                else panel.name
            )
            if panel.name == name or display_name == name:
                return panel

        return None
