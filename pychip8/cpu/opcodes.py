"""Opcode metadata and decoding for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable, List, Sequence


def field_x(word: int) -> int:
    return (word & 0x0F00) >> 8


def field_y(word: int) -> int:
    return (word & 0x00F0) >> 4


def field_n(word: int) -> int:
    return word & 0x000F


def field_kk(word: int) -> int:
    return word & 0x00FF


def field_nnn(word: int) -> int:
    return word & 0x0FFF


@dataclass(frozen=True)
class Instruction:
    """Metadata describing one instruction pattern.

    ``pattern`` holds the fixed bits of the encoding and ``mask`` selects them;
    a word matches when ``word & mask == pattern``. ``template`` is formatted
    with the operand fields (``x``, ``y``, ``n``, ``kk``, ``nnn``) to produce a
    disassembly string.
    """

    pattern: int
    mask: int
    mnemonic: str
    template: str
    handler: str

    def __post_init__(self) -> None:
        if not 0 <= self.pattern <= 0xFFFF or not 0 <= self.mask <= 0xFFFF:
            raise ValueError(f"pattern out of range: {self.pattern:#06x}/{self.mask:#06x}")
        if self.mask & 0xF000 != 0xF000:
            raise ValueError("mask must cover the family nibble")
        if self.pattern & ~self.mask:
            raise ValueError(f"pattern {self.pattern:#06x} sets bits outside mask {self.mask:#06x}")

    @property
    def family(self) -> int:
        return (self.pattern & 0xF000) >> 12

    def matches(self, word: int) -> bool:
        return (word & self.mask) == self.pattern

    def overlaps(self, other: "Instruction") -> bool:
        common = self.mask & other.mask
        return (self.pattern & common) == (other.pattern & common)


@dataclass(frozen=True)
class DecodedInstruction:
    """An instruction word paired with the pattern it matched."""

    word: int
    instruction: Instruction

    @property
    def x(self) -> int:
        return field_x(self.word)

    @property
    def y(self) -> int:
        return field_y(self.word)

    @property
    def n(self) -> int:
        return field_n(self.word)

    @property
    def kk(self) -> int:
        return field_kk(self.word)

    @property
    def nnn(self) -> int:
        return field_nnn(self.word)

    def format(self) -> str:
        return self.instruction.template.format(
            x=self.x, y=self.y, n=self.n, kk=self.kk, nnn=self.nnn
        )


InstructionTable = Sequence[Sequence[Instruction]]


class OpcodeTable:
    """Mutable builder for the per-family instruction lookup table."""

    _FAMILIES: Final[int] = 0x10

    def __init__(self) -> None:
        self._table: List[List[Instruction]] = [[] for _ in range(self._FAMILIES)]

    def register(self, instruction: Instruction) -> None:
        bucket = self._table[instruction.family]
        for existing in bucket:
            if existing.overlaps(instruction):
                raise ValueError(
                    f"pattern {instruction.pattern:#06x} ({instruction.mnemonic}) "
                    f"overlaps {existing.pattern:#06x} ({existing.mnemonic})"
                )
        bucket.append(instruction)

    def register_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.register(instruction)

    def freeze(self) -> InstructionTable:
        return tuple(tuple(bucket) for bucket in self._table)


def build_instruction_table(instructions: Iterable[Instruction]) -> InstructionTable:
    """Build a 16-family instruction lookup table."""

    table = OpcodeTable()
    table.register_all(instructions)
    return table.freeze()


def decode(table: InstructionTable, word: int) -> DecodedInstruction | None:
    """Return the decoded form of ``word``, or None if no pattern matches."""

    word &= 0xFFFF
    for instruction in table[(word & 0xF000) >> 12]:
        if instruction.matches(word):
            return DecodedInstruction(word, instruction)
    return None


def disassemble(word: int, table: InstructionTable | None = None) -> str:
    decoded = decode(table or OPCODE_TABLE, word)
    if decoded is None:
        return f"??? {word & 0xFFFF:#06x}"
    return decoded.format()


DEFAULT_INSTRUCTIONS: Sequence[Instruction] = (
    Instruction(0x00E0, 0xFFFF, "CLS", "CLS", "op_cls"),
    Instruction(0x00EE, 0xFFFF, "RET", "RET", "op_ret"),
    Instruction(0x1000, 0xF000, "JP", "JP {nnn:#05x}", "op_jp"),
    Instruction(0x2000, 0xF000, "CALL", "CALL {nnn:#05x}", "op_call"),
    Instruction(0x3000, 0xF000, "SE", "SE V{x:X}, {kk:#04x}", "op_se_byte"),
    Instruction(0x4000, 0xF000, "SNE", "SNE V{x:X}, {kk:#04x}", "op_sne_byte"),
    Instruction(0x5000, 0xF00F, "SE", "SE V{x:X}, V{y:X}", "op_se_reg"),
    Instruction(0x6000, 0xF000, "LD", "LD V{x:X}, {kk:#04x}", "op_ld_byte"),
    Instruction(0x7000, 0xF000, "ADD", "ADD V{x:X}, {kk:#04x}", "op_add_byte"),
    # Register-to-register ALU group
    Instruction(0x8000, 0xF00F, "LD", "LD V{x:X}, V{y:X}", "op_ld_reg"),
    Instruction(0x8001, 0xF00F, "OR", "OR V{x:X}, V{y:X}", "op_or"),
    Instruction(0x8002, 0xF00F, "AND", "AND V{x:X}, V{y:X}", "op_and"),
    Instruction(0x8003, 0xF00F, "XOR", "XOR V{x:X}, V{y:X}", "op_xor"),
    Instruction(0x8004, 0xF00F, "ADD", "ADD V{x:X}, V{y:X}", "op_add_reg"),
    Instruction(0x8005, 0xF00F, "SUB", "SUB V{x:X}, V{y:X}", "op_sub"),
    Instruction(0x8006, 0xF00F, "SHR", "SHR V{x:X}", "op_shr"),
    Instruction(0x8007, 0xF00F, "SUBN", "SUBN V{x:X}, V{y:X}", "op_subn"),
    Instruction(0x800E, 0xF00F, "SHL", "SHL V{x:X}", "op_shl"),
    Instruction(0x9000, 0xF00F, "SNE", "SNE V{x:X}, V{y:X}", "op_sne_reg"),
    Instruction(0xA000, 0xF000, "LD", "LD I, {nnn:#05x}", "op_ld_i"),
    Instruction(0xB000, 0xF000, "JP", "JP V0, {nnn:#05x}", "op_jp_v0"),
    Instruction(0xC000, 0xF000, "RND", "RND V{x:X}, {kk:#04x}", "op_rnd"),
    Instruction(0xD000, 0xF000, "DRW", "DRW V{x:X}, V{y:X}, {n:d}", "op_drw"),
    # Keypad
    Instruction(0xE09E, 0xF0FF, "SKP", "SKP V{x:X}", "op_skp"),
    Instruction(0xE0A1, 0xF0FF, "SKNP", "SKNP V{x:X}", "op_sknp"),
    # Timers, index and memory transfers
    Instruction(0xF007, 0xF0FF, "LD", "LD V{x:X}, DT", "op_ld_vx_dt"),
    Instruction(0xF00A, 0xF0FF, "LD", "LD V{x:X}, K", "op_ld_vx_key"),
    Instruction(0xF015, 0xF0FF, "LD", "LD DT, V{x:X}", "op_ld_dt_vx"),
    Instruction(0xF018, 0xF0FF, "LD", "LD ST, V{x:X}", "op_ld_st_vx"),
    Instruction(0xF01E, 0xF0FF, "ADD", "ADD I, V{x:X}", "op_add_i"),
    Instruction(0xF029, 0xF0FF, "LD", "LD F, V{x:X}", "op_ld_font"),
    Instruction(0xF033, 0xF0FF, "LD", "LD B, V{x:X}", "op_ld_bcd"),
    Instruction(0xF055, 0xF0FF, "LD", "LD [I], V{x:X}", "op_store_registers"),
    Instruction(0xF065, 0xF0FF, "LD", "LD V{x:X}, [I]", "op_load_registers"),
)


OPCODE_TABLE: Final[InstructionTable] = build_instruction_table(DEFAULT_INSTRUCTIONS)
