"""Cargo adapters: version authority, version query and tool installation."""

from snaprel.cargo.authority import CargoGetQuery, CargoReleaseAuthority
from snaprel.cargo.errors import ToolError
from snaprel.cargo.tools import CargoToolInstaller

__all__ = [
    "CargoGetQuery",
    "CargoReleaseAuthority",
    "CargoToolInstaller",
    "ToolError",
]
