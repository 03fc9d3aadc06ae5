"""bundlex - resolve which workspace packages need a bundle step."""

__version__ = "0.3.0"

from bundlex.resolve import find_configs, resolve_workspace  # noqa: E402

__all__ = ["__version__", "find_configs", "resolve_workspace"]
