"""Expert Panel - concurrent multi-expert question answering."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("expert-panel")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "unknown"
