"""Package marker so EDMC can import the Generic Panel plugin folder as a package."""

# When this module is executed outside a package context (e.g. running tests
# from a checkout), fall back to absolute imports.
try:
    from .version import __version__  # type: ignore  # noqa: F401
except ImportError:  # pragma: no cover - fallback for direct execution
    from version import __version__  # type: ignore  # noqa: F401

__all__ = ["__version__"]
