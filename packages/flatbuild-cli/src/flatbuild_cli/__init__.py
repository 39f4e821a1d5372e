"""flatbuild-cli: Command line interface for flatbuild."""

from __future__ import annotations

__version__ = "0.1.0"
