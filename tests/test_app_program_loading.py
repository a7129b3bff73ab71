"""CHIP8App program loading, input and stepping."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from pychip8.ui.app import AppConfig, CHIP8App

import run


def _fake_pygame(names: dict[int, str]) -> SimpleNamespace:
    return SimpleNamespace(key=SimpleNamespace(name=lambda code: names.get(code, "unknown")))


def _write_rom(tmp_path, payload: bytes):
    rom_path = tmp_path / "test.ch8"
    rom_path.write_bytes(payload)
    return rom_path


def test_app_loads_program_at_0x200(tmp_path) -> None:
    rom_path = _write_rom(tmp_path, b"\x60\x05\x12\x02")
    app = CHIP8App(AppConfig(rom_path=rom_path))

    machine = app._create_machine(rom_path)

    assert machine.memory.load_block(0x200, 4) == b"\x60\x05\x12\x02"
    assert machine.program_counter == 0x200


def test_app_rejects_missing_and_oversize_programs(tmp_path) -> None:
    app = CHIP8App(AppConfig())

    with pytest.raises(RuntimeError, match="not found"):
        app._create_machine(tmp_path / "missing.ch8")

    big = _write_rom(tmp_path, bytes(4000))
    with pytest.raises(RuntimeError, match="Failed to load"):
        app._create_machine(big)


def test_app_steps_machine(tmp_path) -> None:
    rom_path = _write_rom(tmp_path, b"\x60\x05\x70\x01\x12\x02")
    app = CHIP8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine(rom_path)

    executed = app._step_machine(machine, 5)

    assert executed == 5
    assert machine.registers[0] == 7


def test_app_key_events_drive_keypad(tmp_path) -> None:
    rom_path = _write_rom(tmp_path, b"\xF3\x0A")
    app = CHIP8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine(rom_path)
    app._machine = machine
    pygame = _fake_pygame({101: "e", 102: "space"})

    assert app._step_machine(machine, 3) == 0

    app._handle_key_event(pygame, 102, pressed=True)
    assert machine.keypad.first_pressed() is None

    app._handle_key_event(pygame, 101, pressed=True)
    assert machine.keypad.is_pressed(0x6)
    assert app._step_machine(machine, 1) == 1
    assert machine.registers[3] == 0x6

    app._handle_key_event(pygame, 101, pressed=False)
    assert not machine.keypad.is_pressed(0x6)


def test_app_reports_fault(tmp_path, capsys) -> None:
    rom_path = _write_rom(tmp_path, b"\x00\xEE")
    app = CHIP8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine(rom_path)

    with pytest.raises(RuntimeError, match="CHIP-8 fault"):
        app._step_machine(machine, 1)

    assert machine.halted
    assert "CPU PC=200" in capsys.readouterr().out


def test_app_rejects_unknown_palette() -> None:
    with pytest.raises(ValueError):
        CHIP8App(AppConfig(palette="sepia"))


def test_cli_arguments(tmp_path) -> None:
    parser = run.build_arg_parser()
    args = parser.parse_args([str(tmp_path / "game.ch8"), "--scale", "4", "--speed", "900", "--mute"])

    assert args.scale == 4
    assert args.speed == 900
    assert args.mute
    assert args.palette == "mono"


def test_cli_rejects_missing_rom(tmp_path) -> None:
    with pytest.raises(SystemExit):
        run.main([str(tmp_path / "missing.ch8")])
