"""Exception hierarchy for expert-panel.

Per-expert failures are never raised; they are captured in
``InvocationResult``. These exceptions cover problems that must surface
before a panel runs, such as missing credentials or an unknown panel.
"""


class ExpertPanelError(Exception):
    """Base class for expert-panel errors."""


class ConfigurationError(ExpertPanelError):
    """Backend, credential or file configuration is missing or invalid."""


class PanelNotFoundError(ExpertPanelError):
    """A named panel could not be located in any panel directory."""

    def __init__(self, name: str, searched: list[str]) -> None:
        self.name = name
        self.searched = searched
        locations = ", ".join(searched) if searched else "(no panel directories)"
        super().__init__(f"Panel '{name}' not found in: {locations}")
