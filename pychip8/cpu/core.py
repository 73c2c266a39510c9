"""CHIP-8 execution engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from pychip8.bus import MemoryError, MemorySystem
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import FONT_BASE_ADDRESS, FrameBuffer, glyph_address

from .opcodes import OPCODE_TABLE, DecodedInstruction, Instruction, InstructionTable, decode
from .rng import RandomSource, SystemRandomSource


class CPUError(Exception):
    """Base error for CPU-related failures."""


class DecodeError(CPUError):
    """Raised in strict mode when an instruction word matches no pattern."""

    def __init__(self, word: int, pc: int) -> None:
        super().__init__(f"unknown instruction {word:#06x} at {pc:#05x}")
        self.word = word
        self.pc = pc


class StackError(CPUError):
    """Raised on call-stack overflow or underflow."""


class AddressFaultError(CPUError):
    """Raised when a program reaches outside the address space."""


PROGRAM_START = 0x200
STACK_DEPTH = 16
REGISTER_COUNT = 16
FLAG_REGISTER = 0xF
SPRITE_WIDTH = 8


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file."""

    pc: int = PROGRAM_START
    i: int = 0x000
    sp: int = 0
    delay_timer: int = 0
    sound_timer: int = 0
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    registers: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))

    def clone(self) -> "CPUState":
        return CPUState(
            self.pc,
            self.i,
            self.sp,
            self.delay_timer,
            self.sound_timer,
            list(self.stack),
            bytearray(self.registers),
        )


@dataclass
class Chip8CPU:
    """Fetch/decode/execute engine owning the CHIP-8 machine state.

    ``memory``, ``framebuffer`` and ``keypad`` are supplied by the machine
    assembly; the keypad is written by the host between steps and only read
    here. ``random_source`` feeds ``Cxkk`` and can be swapped for a fixed
    sequence in tests.
    """

    memory: MemorySystem
    framebuffer: FrameBuffer = field(default_factory=FrameBuffer)
    keypad: Keypad = field(default_factory=Keypad)
    random_source: RandomSource = field(default_factory=SystemRandomSource)
    instruction_table: InstructionTable = field(default=OPCODE_TABLE)
    strict_decode: bool = False
    font_base: int = FONT_BASE_ADDRESS

    state: CPUState = field(default_factory=CPUState)
    cycle_count: int = 0
    decode_failures: int = 0
    last_decode_failure: int | None = None
    waiting_for_key: bool = False

    def reset(self) -> None:
        """Reset registers, timers, stack and display; memory is left intact."""

        self.state = CPUState()
        self.framebuffer.clear()
        self.cycle_count = 0
        self.decode_failures = 0
        self.last_decode_failure = None
        self.waiting_for_key = False

    @property
    def sound_active(self) -> bool:
        return self.state.sound_timer > 0

    def step(self) -> Instruction | None:
        """Execute a single instruction and decay the timers.

        Returns the executed instruction, or None when the word could not be
        decoded. Undecodable words are reported through ``decode_failures``
        and ``last_decode_failure``; the ``cpu`` debug category only adds a
        log line. Faults leave ``pc`` on the faulting instruction and commit
        no other change, counters included.
        """

        state = self.state
        pc_before = state.pc
        word = self._fetch_word(pc_before)
        state.pc = pc_before + 2

        decoded = decode(self.instruction_table, word)
        if decoded is None:
            self._report_decode_failure(word, pc_before)
            instruction = None
        else:
            instruction = decoded.instruction
            if debug_enabled("cpu"):
                debug_log("cpu", "pc=%03x word=%04x %s", pc_before, word, decoded.format())
            handler = getattr(self, instruction.handler, None)
            if handler is None:
                state.pc = pc_before
                raise CPUError(f"handler '{instruction.handler}' not implemented")
            try:
                handler(decoded)
            except MemoryError as exc:
                state.pc = pc_before
                raise AddressFaultError(f"{decoded.format()} at {pc_before:#05x}: {exc}") from exc
            except CPUError:
                state.pc = pc_before
                raise

        self._tick_timers()
        self.cycle_count += 1
        return instruction

    def run(self, steps: int) -> int:
        """Execute ``steps`` instructions and return how many ran."""

        for _ in range(steps):
            self.step()
        return steps

    # ------------------------------------------------------------------
    # Instruction handlers

    def op_cls(self, _: DecodedInstruction) -> None:
        self.framebuffer.clear()

    def op_ret(self, _: DecodedInstruction) -> None:
        state = self.state
        if state.sp == 0:
            raise StackError("return with empty call stack")
        state.sp -= 1
        state.pc = state.stack[state.sp]

    def op_jp(self, op: DecodedInstruction) -> None:
        self.state.pc = op.nnn

    def op_call(self, op: DecodedInstruction) -> None:
        state = self.state
        if state.sp >= STACK_DEPTH:
            raise StackError(f"call stack overflow (depth {STACK_DEPTH})")
        state.stack[state.sp] = state.pc
        state.sp += 1
        state.pc = op.nnn

    def op_se_byte(self, op: DecodedInstruction) -> None:
        if self.state.registers[op.x] == op.kk:
            self._skip()

    def op_sne_byte(self, op: DecodedInstruction) -> None:
        if self.state.registers[op.x] != op.kk:
            self._skip()

    def op_se_reg(self, op: DecodedInstruction) -> None:
        regs = self.state.registers
        if regs[op.x] == regs[op.y]:
            self._skip()

    def op_ld_byte(self, op: DecodedInstruction) -> None:
        self.state.registers[op.x] = op.kk

    def op_add_byte(self, op: DecodedInstruction) -> None:
        regs = self.state.registers
        regs[op.x] = (regs[op.x] + op.kk) & 0xFF

    def op_ld_reg(self, op: DecodedInstruction) -> None:
        regs = self.state.registers
        regs[op.x] = regs[op.y]

    def op_or(self, op: DecodedInstruction) -> None:
        regs = self.state.registers
        regs[op.x] = regs[op.x] | regs[op.y]

    def op_and(self, op: DecodedInstruction) -> None:
        regs = self.state.registers
        regs[op.x] = regs[op.x] & regs[op.y]

    def op_xor(self, op: DecodedInstruction) -> None:
        regs = self.state.registers
        regs[op.x] = regs[op.x] ^ regs[op.y]

    def op_add_reg(self, op: DecodedInstruction) -> None:
        regs = self.state.registers
        total = regs[op.x] + regs[op.y]
        regs[op.x] = total & 0xFF
        regs[FLAG_REGISTER] = 1 if total > 0xFF else 0

    def op_sub(self, op: DecodedInstruction) -> None:
        regs = self.state.registers
        vx, vy = regs[op.x], regs[op.y]
        regs[FLAG_REGISTER] = 1 if vx >= vy else 0
        regs[op.x] = (vx - vy) & 0xFF

    def op_shr(self, op: DecodedInstruction) -> None:
        regs = self.state.registers
        vx = regs[op.x]
        regs[FLAG_REGISTER] = vx & 0x01
        regs[op.x] = vx >> 1

    def op_subn(self, op: DecodedInstruction) -> None:
        regs = self.state.registers
        vx, vy = regs[op.x], regs[op.y]
        regs[FLAG_REGISTER] = 1 if vy >= vx else 0
        regs[op.x] = (vy - vx) & 0xFF

    def op_shl(self, op: DecodedInstruction) -> None:
        regs = self.state.registers
        vx = regs[op.x]
        regs[FLAG_REGISTER] = (vx & 0x80) >> 7
        regs[op.x] = (vx << 1) & 0xFF

    def op_sne_reg(self, op: DecodedInstruction) -> None:
        regs = self.state.registers
        if regs[op.x] != regs[op.y]:
            self._skip()

    def op_ld_i(self, op: DecodedInstruction) -> None:
        self.state.i = op.nnn

    def op_jp_v0(self, op: DecodedInstruction) -> None:
        target = self.state.registers[0] + op.nnn
        if target >= self.memory.capacity:
            raise AddressFaultError(f"jump target {target:#05x} outside address space")
        self.state.pc = target

    def op_rnd(self, op: DecodedInstruction) -> None:
        self.state.registers[op.x] = self.random_source.next_byte() & op.kk

    def op_drw(self, op: DecodedInstruction) -> None:
        state = self.state
        regs = state.registers
        framebuffer = self.framebuffer
        origin_x = regs[op.x] % framebuffer.width
        origin_y = regs[op.y] % framebuffer.height
        sprite = self.memory.read_block(state.i, op.n)

        regs[FLAG_REGISTER] = 0
        collision = False
        for row, bits in enumerate(sprite):
            y = origin_y + row
            if y >= framebuffer.height:
                break
            for col in range(SPRITE_WIDTH):
                if not bits & (0x80 >> col):
                    continue
                x = origin_x + col
                if x >= framebuffer.width:
                    break
                if framebuffer.toggle(x, y):
                    collision = True
        if collision:
            regs[FLAG_REGISTER] = 1

    def op_skp(self, op: DecodedInstruction) -> None:
        if self.keypad.is_pressed(self.state.registers[op.x]):
            self._skip()

    def op_sknp(self, op: DecodedInstruction) -> None:
        if not self.keypad.is_pressed(self.state.registers[op.x]):
            self._skip()

    def op_ld_vx_dt(self, op: DecodedInstruction) -> None:
        self.state.registers[op.x] = self.state.delay_timer

    def op_ld_vx_key(self, op: DecodedInstruction) -> None:
        key = self.keypad.first_pressed()
        if key is None:
            # Re-run this instruction on the next step until a key is down.
            self.state.pc -= 2
            self.waiting_for_key = True
            return
        self.state.registers[op.x] = key
        self.waiting_for_key = False

    def op_ld_dt_vx(self, op: DecodedInstruction) -> None:
        self.state.delay_timer = self.state.registers[op.x]

    def op_ld_st_vx(self, op: DecodedInstruction) -> None:
        self.state.sound_timer = self.state.registers[op.x]

    def op_add_i(self, op: DecodedInstruction) -> None:
        self.state.i = (self.state.i + self.state.registers[op.x]) & 0xFFFF

    def op_ld_font(self, op: DecodedInstruction) -> None:
        self.state.i = glyph_address(self.state.registers[op.x], self.font_base)

    def op_ld_bcd(self, op: DecodedInstruction) -> None:
        value = self.state.registers[op.x]
        digits = bytes((value // 100, (value // 10) % 10, value % 10))
        self.memory.write_block(self.state.i, digits)

    def op_store_registers(self, op: DecodedInstruction) -> None:
        count = op.x + 1
        self.memory.write_block(self.state.i, bytes(self.state.registers[:count]))

    def op_load_registers(self, op: DecodedInstruction) -> None:
        count = op.x + 1
        self.state.registers[:count] = self.memory.read_block(self.state.i, count)

    # ------------------------------------------------------------------
    # Helpers

    def _fetch_word(self, address: int) -> int:
        try:
            return self.memory.load16(address)
        except MemoryError as exc:
            raise AddressFaultError(f"instruction fetch at {address:#05x}: {exc}") from exc

    def _skip(self) -> None:
        self.state.pc += 2

    def _tick_timers(self) -> None:
        state = self.state
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            state.sound_timer -= 1

    def _report_decode_failure(self, word: int, pc: int) -> None:
        if self.strict_decode:
            self.state.pc = pc
            raise DecodeError(word, pc)
        self.decode_failures += 1
        self.last_decode_failure = word
        debug_log("cpu", "decode failure word=%04x pc=%03x (skipped)", word, pc)
