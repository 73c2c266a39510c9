"""Loaders for CHIP-8 program images."""

from __future__ import annotations

from .program import (
    PROGRAM_START,
    AddressRegion,
    LoaderError,
    ProgramImage,
    ProgramTooLargeError,
    load_program,
    load_program_from_path,
)

__all__ = [
    "PROGRAM_START",
    "AddressRegion",
    "ProgramImage",
    "LoaderError",
    "ProgramTooLargeError",
    "load_program",
    "load_program_from_path",
]
