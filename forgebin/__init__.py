"""forgebin - install pre-built binaries from forge releases."""

__version__ = "0.1.0"
