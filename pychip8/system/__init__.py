"""System assembly for the CHIP-8 interpreter."""

from .machine import Machine, MachineConfig, create_machine

__all__ = ["Machine", "MachineConfig", "create_machine"]
