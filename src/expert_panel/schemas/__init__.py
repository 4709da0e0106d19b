"""Schema definitions for expert-panel configuration files."""

from .expert_config import ExpertConfig, PanelFileConfig, parse_panel_file

__all__ = [
    "ExpertConfig",
    "PanelFileConfig",
    "parse_panel_file",
]
