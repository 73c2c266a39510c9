"""Chip8App program loading checks."""

from __future__ import annotations

import pytest

from pychip8.system import MachineConfig, create_machine
from pychip8.ui.app import AppConfig, Chip8App


def test_app_load_program(tmp_path) -> None:
    program_path = tmp_path / "sample.ch8"
    program_path.write_bytes(b"\x60\x2A\x12\x02")

    machine = create_machine(MachineConfig())
    app = Chip8App(AppConfig(program_path=program_path))

    app._load_program(machine, program_path)

    assert machine.memory.read_block(0x200, 4) == b"\x60\x2A\x12\x02"
    assert machine.program is not None
    assert machine.program.name == "sample"


def test_app_create_machine_is_ready_to_step(tmp_path) -> None:
    program_path = tmp_path / "clear.ch8"
    program_path.write_bytes(b"\x00\xE0")

    app = Chip8App(AppConfig(program_path=program_path, seed=1))
    machine = app._create_machine(program_path)

    assert machine.cpu.state.pc == 0x200
    machine.step()
    assert machine.cpu.state.pc == 0x202
    assert machine.cpu.decode_failures == 0


def test_app_rejects_missing_program(tmp_path) -> None:
    app = Chip8App(AppConfig())
    with pytest.raises(RuntimeError, match="not found"):
        app._create_machine(tmp_path / "missing.ch8")


def test_app_rejects_oversized_program(tmp_path) -> None:
    program_path = tmp_path / "huge.ch8"
    program_path.write_bytes(bytes(0xE01))

    app = Chip8App(AppConfig(program_path=program_path))
    with pytest.raises(RuntimeError, match="Failed to load"):
        app._create_machine(program_path)


def test_app_step_cpu_converts_faults(tmp_path) -> None:
    program_path = tmp_path / "ret.ch8"
    program_path.write_bytes(b"\x00\xEE")

    app = Chip8App(AppConfig(program_path=program_path, cycles_per_frame=1))
    machine = app._create_machine(program_path)

    with pytest.raises(RuntimeError, match="CPU fault"):
        app._step_cpu(machine)
    assert machine.cpu.state.pc == 0x200


def test_app_config_validation() -> None:
    with pytest.raises(ValueError):
        Chip8App(AppConfig(scale=0))
    with pytest.raises(ValueError):
        Chip8App(AppConfig(cycles_per_frame=0))


def test_debug_shell_dumps_memory_and_quits(tmp_path, monkeypatch, capsys) -> None:
    program_path = tmp_path / "shell.ch8"
    program_path.write_bytes(b"\x60\x2A\x12\x02")

    app = Chip8App(AppConfig(program_path=program_path))
    machine = app._create_machine(program_path)
    app._running = True

    commands = iter(["m 200 4", "c", "bogus", "q"])
    monkeypatch.setattr("builtins.input", lambda _prompt: next(commands))
    app._enter_debug_shell(machine)

    out = capsys.readouterr().out
    assert "200: 60 2A 12 02" in out
    assert "PC=200" in out
    assert "next 602A LD V0, 0x2a" in out
    assert "commands:" in out
    assert "Exiting." in out
    assert app._running is False


def test_debug_shell_resumes_on_empty_line(tmp_path, monkeypatch, capsys) -> None:
    program_path = tmp_path / "shell.ch8"
    program_path.write_bytes(b"\x00\xE0")

    app = Chip8App(AppConfig(program_path=program_path))
    machine = app._create_machine(program_path)
    app._running = True

    monkeypatch.setattr("builtins.input", lambda _prompt: "")
    app._enter_debug_shell(machine)

    assert app._running is True
    assert "Resuming." in capsys.readouterr().out
