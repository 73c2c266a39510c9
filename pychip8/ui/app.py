"""Pygame front end for the CHIP-8 interpreter."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pychip8.audio import SquareWaveBeeper
from pychip8.bus import MemoryError
from pychip8.cpu import CPUError, opcodes
from pychip8.loader import PROGRAM_START, LoaderError, load_program_from_path
from pychip8.system import Machine, MachineConfig, create_machine
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import MONOCHROME, Palette, Renderer


@dataclass
class AppConfig:
    """Configuration for the CHIP-8 emulator frontend."""

    program_path: Optional[Path] = None
    scale: int = 10
    fullscreen: bool = False
    cycles_per_frame: int = 10
    seed: Optional[int] = None
    strict_decode: bool = False
    tone_frequency: float = 440.0
    palette: Palette = MONOCHROME


class Chip8App:
    """Thin wrapper around the Pygame event loop."""

    def __init__(self, config: AppConfig) -> None:
        if config.scale <= 0:
            raise ValueError("scale must be positive")
        if config.cycles_per_frame <= 0:
            raise ValueError("cycles_per_frame must be positive")
        self._config = config
        self._running = False
        self._beeper: SquareWaveBeeper | None = None
        self._machine: Machine | None = None
        self._perf_enabled = debug_enabled("perf")
        self._perf_frame = 0
        self._pygame = None
        self._trace_recorder: TraceRecorder | None = None
        if debug_enabled("trace"):
            self._trace_recorder = TraceRecorder(512)

    @property
    def machine(self) -> Machine | None:
        return self._machine

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.program_path:
            raise RuntimeError("program image is required; pass a ROM path")

        machine = self._create_machine(self._config.program_path)
        self._machine = machine

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {self._config.program_path.name}")
        self._pygame = pygame
        self._initialise_audio(pygame)

        renderer = Renderer(self._config.palette)
        framebuffer = machine.framebuffer
        surface_size = (framebuffer.width * self._config.scale, framebuffer.height * self._config.scale)
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode(surface_size, flags)

        clock = pygame.time.Clock()
        self._running = True

        while self._running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self._running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    self._enter_debug_shell(machine)
                elif event.type == pygame.KEYDOWN:
                    self._handle_key_event(pygame, event.key, pressed=True)
                elif event.type == pygame.KEYUP:
                    self._handle_key_event(pygame, event.key, pressed=False)

            frame_start_time = time.perf_counter()
            self._step_cpu(machine)

            frame = renderer.render(framebuffer, scale=self._config.scale)
            screen.blit(frame.to_surface(), (0, 0))
            pygame.display.flip()

            if self._beeper is not None:
                self._beeper.set_state(machine.cpu.sound_active)

            if self._perf_enabled:
                self._perf_frame += 1
                debug_log(
                    "perf",
                    "frame=%d steps=%d frame_ms=%.3f",
                    self._perf_frame,
                    self._config.cycles_per_frame,
                    (time.perf_counter() - frame_start_time) * 1000.0,
                )

            clock.tick(_FRAME_RATE)

        if self._beeper is not None:
            self._beeper.shutdown()
        pygame.quit()

    def _initialise_audio(self, pygame) -> None:
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - best-effort path
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)

        mixer_state = pygame.mixer.get_init()
        if mixer_state is None:
            if debug_enabled("audio"):
                debug_log("audio", "mixer_unavailable")
            return
        try:
            self._beeper = SquareWaveBeeper(sample_rate=mixer_state[0], frequency=self._config.tone_frequency)
        except RuntimeError as exc:
            self._beeper = None
            if debug_enabled("audio"):
                debug_log("audio", "beeper_init_failed=%s", exc)

    def _handle_key_event(self, pygame, key_code: int, *, pressed: bool) -> None:
        machine = self._machine
        if machine is None:
            return
        name = pygame.key.name(key_code)
        if pressed:
            machine.keypad.press_host_key(name)
        else:
            machine.keypad.release_host_key(name)

    def _create_machine(self, program_path: Path) -> Machine:
        machine = create_machine(
            MachineConfig(
                seed=self._config.seed,
                strict_decode=self._config.strict_decode,
            )
        )
        self._load_program(machine, program_path)
        return machine

    def _load_program(self, machine: Machine, program_path: Path) -> None:
        try:
            machine.program = load_program_from_path(program_path, machine.memory)
        except FileNotFoundError as exc:
            raise RuntimeError(f"Program file not found: {program_path}") from exc
        except LoaderError as exc:
            raise RuntimeError(f"Failed to load program {program_path}: {exc}") from exc

    def _step_cpu(self, machine: Machine) -> None:
        cpu = machine.cpu
        trace = self._trace_recorder
        try:
            for _ in range(self._config.cycles_per_frame):
                if trace is None:
                    cpu.step()
                    continue
                state_before = cpu.state.clone()
                word = machine.memory.load16(state_before.pc)
                instruction = cpu.step()
                note = "decode-failure" if instruction is None else ("wait-key" if cpu.waiting_for_key else "")
                trace.record_step(state_before, word, mnemonic=opcodes.disassemble(word), note=note)
        except (CPUError, MemoryError) as exc:
            self._running = False
            if trace is not None:
                trace.dump("trace", limit=32)
            raise RuntimeError(f"CPU fault: {exc}") from exc


    # ------------------------------------------------------------------
    # Debug shell (ESC pauses the loop and reads commands from stdin)

    def _enter_debug_shell(self, machine: Machine) -> None:
        commands = {
            "c": self._dump_cpu,
            "cpu": self._dump_cpu,
            "s": self._dump_screen,
            "screen": self._dump_screen,
            "t": lambda _machine: self._dump_trace(),
            "trace": lambda _machine: self._dump_trace(),
        }
        print("\n=== CHIP-8 debug shell ===")
        print(_SHELL_HELP)

        while self._running:
            try:
                line = input("chip8> ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                break
            if line in {"", "resume"}:
                break
            if line in {"q", "quit", "exit"}:
                self._running = False
                break
            name, _, rest = line.partition(" ")
            if name in {"m", "mem"}:
                self._dump_memory(machine, rest)
            elif name in commands:
                commands[name](machine)
            else:
                print(_SHELL_HELP)

        print("Resuming." if self._running else "Exiting.")
        if self._pygame is not None:
            self._pygame.event.clear()

    def _dump_cpu(self, machine: Machine) -> None:
        cpu = machine.cpu
        state = cpu.state
        print(
            f"PC={state.pc:03X} I={state.i:03X} SP={state.sp:X} "
            f"DT={state.delay_timer:02X} ST={state.sound_timer:02X} cycles={cpu.cycle_count}"
        )
        print("V   " + " ".join(f"{value:02X}" for value in state.registers))
        stack = state.stack[: state.sp]
        print("STK " + (" ".join(f"{value:03X}" for value in stack) if stack else "-"))
        try:
            word = machine.memory.load16(state.pc)
        except MemoryError as exc:
            print(f"next <{exc}>")
        else:
            print(f"next {word:04X} {opcodes.disassemble(word)}")
        if cpu.decode_failures:
            print(f"decode failures {cpu.decode_failures} (last {cpu.last_decode_failure:04X})")

    def _dump_screen(self, machine: Machine) -> None:
        for row in machine.framebuffer.rows():
            print("".join("#" if lit else "." for lit in row))

    def _dump_trace(self, limit: int = 64) -> None:
        if self._trace_recorder is None:
            print("Tracing is off; run with CHIP8_DEBUG=trace.")
            return
        lines = self._trace_recorder.format_entries(limit)
        if not lines:
            print("Trace buffer is empty.")
        for line in lines:
            print(f"  {line}")

    def _dump_memory(self, machine: Machine, args: str = "") -> None:
        """Hex dump ``m [start] [length]``; numbers are hex unless prefixed with ``#``."""

        values = [_parse_shell_number(token) for token in args.split()]
        if None in values or len(values) > 2 or any(value < 0 for value in values):
            print("usage: m [start] [length]")
            return
        start = values[0] if values else PROGRAM_START
        length = values[1] if len(values) > 1 else 0x80
        if start >= machine.memory.capacity:
            print(f"start must be below {machine.memory.capacity:#05x}")
            return
        end = min(start + length, machine.memory.capacity)
        for row in range(start, end, 16):
            chunk = machine.memory.read_block(row, min(16, end - row))
            print(f"{row:03X}: " + " ".join(f"{value:02X}" for value in chunk))


def _parse_shell_number(token: str) -> int | None:
    try:
        if token.startswith("#"):
            return int(token[1:], 10)
        return int(token.removeprefix("0x"), 16)
    except ValueError:
        return None


_SHELL_HELP = "commands: [Enter] resume, c(pu), s(creen), m(em) [start] [len], t(race), q(uit)"
_FRAME_RATE = 60
