"""CHIP-8 machine assembly and memory map."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pychip8.bus import Memory, MemorySystem
from pychip8.cpu import Chip8CPU, RandomSource, SystemRandomSource
from pychip8.cpu.opcodes import Instruction
from pychip8.io import Keypad
from pychip8.loader import ProgramImage, load_program
from pychip8.video import FONT_BASE_ADDRESS, FrameBuffer, install_font

MEMORY_SIZE = 0x1000
INTERPRETER_START = 0x000
PROGRAM_START = 0x200


@dataclass
class MachineConfig:
    """Runtime configuration for the CHIP-8 machine."""

    program_image: Optional[bytes] = None
    program_name: str = ""
    random_source: Optional[RandomSource] = None
    seed: Optional[int] = None
    strict_decode: bool = False


@dataclass
class Machine:
    """Aggregates the core components of the CHIP-8."""

    memory: MemorySystem
    cpu: Chip8CPU
    interpreter_ram: Memory
    program_ram: Memory
    framebuffer: FrameBuffer
    keypad: Keypad
    program: ProgramImage | None = None

    def step(self) -> Instruction | None:
        """Run one instruction; None means the word was skipped as undecodable."""

        return self.cpu.step()

    def load_program(self, image: bytes, name: str = "") -> ProgramImage:
        self.program = load_program(image, self.memory, name=name)
        return self.program


class InterpreterRam(Memory):
    """Reserved block below the program area; holds the glyph set."""


class ProgramRam(Memory):
    """Block that receives the program image."""


def create_machine(config: MachineConfig) -> Machine:
    """Instantiate a CHIP-8 machine with the requested configuration."""

    memory = MemorySystem()
    memory.allocate_space(MEMORY_SIZE)

    interpreter_ram = InterpreterRam(INTERPRETER_START, PROGRAM_START - INTERPRETER_START)
    memory.register_memory(interpreter_ram)

    program_ram = ProgramRam(PROGRAM_START, MEMORY_SIZE - PROGRAM_START)
    memory.register_memory(program_ram)

    install_font(memory, FONT_BASE_ADDRESS)

    framebuffer = FrameBuffer()
    keypad = Keypad()
    random_source = config.random_source or SystemRandomSource(config.seed)

    cpu = Chip8CPU(
        memory,
        framebuffer=framebuffer,
        keypad=keypad,
        random_source=random_source,
        strict_decode=config.strict_decode,
        font_base=FONT_BASE_ADDRESS,
    )
    cpu.reset()

    machine = Machine(
        memory=memory,
        cpu=cpu,
        interpreter_ram=interpreter_ram,
        program_ram=program_ram,
        framebuffer=framebuffer,
        keypad=keypad,
    )

    if config.program_image is not None:
        machine.load_program(config.program_image, config.program_name)

    return machine
