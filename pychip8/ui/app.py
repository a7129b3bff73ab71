"""Pygame frontend for the CHIP-8 emulator."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pychip8.audio import SquareWaveBeeper
from pychip8.bus import MemoryAccessError
from pychip8.cpu import CPUError
from pychip8.io import key_for_name
from pychip8.loader import RomFormatError, load_program_image_from_path
from pychip8.system import DEFAULT_STEPS_PER_SECOND, MachineConfig, StepScheduler, VirtualMachine, create_machine
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import PALETTES, SCREEN_HEIGHT, SCREEN_WIDTH, Renderer


@dataclass
class AppConfig:
    """Configuration for the CHIP-8 emulator frontend."""

    rom_path: Optional[Path] = None
    scale: int = 10
    steps_per_second: int = DEFAULT_STEPS_PER_SECOND
    frame_rate: int = 60
    fullscreen: bool = False
    palette: str = "mono"
    enable_sound: bool = True


class CHIP8App:
    """Window, input and pacing around a :class:`VirtualMachine`."""

    def __init__(self, config: AppConfig) -> None:
        if config.palette not in PALETTES:
            raise ValueError(f"unknown palette: {config.palette}")
        self._config = config
        self._running = False
        self._pygame = None
        self._beeper: SquareWaveBeeper | None = None
        self._machine: VirtualMachine | None = None
        self._scheduler = StepScheduler(config.steps_per_second)
        self._perf_enabled = debug_enabled("perf")
        self._perf_frame = 0
        self._trace_recorder: TraceRecorder | None = None
        if debug_enabled("trace"):
            self._trace_recorder = TraceRecorder(512)
        self._frame_counter = 0

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.rom_path:
            raise RuntimeError("program image is required; pass a ROM path")

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {self._config.rom_path.name}")
        self._pygame = pygame

        if self._config.enable_sound:
            self._initialise_audio(pygame)

        machine = self._create_machine(self._config.rom_path)
        self._machine = machine

        renderer = Renderer(SCREEN_WIDTH, SCREEN_HEIGHT, palette=PALETTES[self._config.palette])
        display_size = (SCREEN_WIDTH * self._config.scale, SCREEN_HEIGHT * self._config.scale)
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode(display_size, flags)

        clock = pygame.time.Clock()
        self._running = True
        renderer.render_full(machine.display)

        try:
            while self._running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        self._running = False
                    elif event.type == pygame.KEYDOWN:
                        self._handle_key_event(pygame, event.key, pressed=True)
                    elif event.type == pygame.KEYUP:
                        self._handle_key_event(pygame, event.key, pressed=False)

                elapsed = clock.tick(self._config.frame_rate) / 1000.0
                steps = self._scheduler.steps_for(elapsed)

                frame_start = time.perf_counter()
                self._step_machine(machine, steps)

                renderer.sync(machine.display)
                frame = renderer.frame.to_surface()
                screen.blit(pygame.transform.scale(frame, display_size), (0, 0))
                pygame.display.flip()

                if self._perf_enabled:
                    self._perf_frame += 1
                    duration = time.perf_counter() - frame_start
                    debug_log(
                        "perf",
                        "frame=%d steps=%d frame_ms=%.3f fps=%.1f",
                        self._perf_frame,
                        steps,
                        duration * 1000.0,
                        clock.get_fps(),
                    )
                self._frame_counter += 1
        finally:
            if self._beeper is not None:
                self._beeper.shutdown()
            pygame.quit()

    def _initialise_audio(self, pygame) -> None:
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - hardware dependent
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)
                return

        mixer_state = pygame.mixer.get_init()
        if mixer_state is None:
            if debug_enabled("audio"):
                debug_log("audio", "mixer_unavailable")
            return
        try:
            self._beeper = SquareWaveBeeper(sample_rate=mixer_state[0])
        except RuntimeError as exc:
            self._beeper = None
            if debug_enabled("audio"):
                debug_log("audio", "beeper_init_failed=%s", exc)

    def _handle_key_event(self, pygame, key_code: int, *, pressed: bool) -> None:
        machine = self._machine
        if machine is None:
            return
        name = pygame.key.name(key_code)
        index = key_for_name(name)
        if debug_enabled("input"):
            debug_log("input", "event=%s key=%s pressed=%s", name, index, pressed)
        if index is None:
            return
        if pressed:
            machine.set_key(index)
        else:
            machine.clear_key(index)

    def _handle_beep(self) -> None:
        if self._beeper is not None:
            self._beeper.beep()

    def _create_machine(self, rom_path: Path) -> VirtualMachine:
        try:
            image = load_program_image_from_path(rom_path)
        except FileNotFoundError as exc:
            raise RuntimeError(f"Program file not found: {rom_path}") from exc
        except RomFormatError as exc:
            raise RuntimeError(f"Failed to load program {rom_path}: {exc}") from exc

        machine = create_machine(MachineConfig(beep_callback=self._handle_beep))
        machine.load_program(image.data)
        if debug_enabled("cpu"):
            debug_log("cpu", "program=%s size=%d", image.name, image.size)
        return machine

    def _step_machine(self, machine: VirtualMachine, steps: int) -> int:
        """Run ``steps`` machine steps; return the number of instructions executed."""

        trace = self._trace_recorder
        executed = 0
        try:
            for _ in range(steps):
                state_before = machine.cpu.state.clone() if trace is not None else None
                instruction = machine.step()
                if instruction is not None:
                    executed += 1
                if trace is not None and state_before is not None:
                    trace.record_step(
                        state_before,
                        machine.current_opcode,
                        delay=machine.delay_timer,
                        sound=machine.sound_timer,
                        stalled=machine.waiting_for_key,
                        mnemonic=instruction.mnemonic if instruction is not None else "",
                    )
        except (CPUError, MemoryAccessError) as exc:
            self._running = False
            self._dump_cpu(machine)
            if trace is not None:
                trace.dump("trace", limit=32)
            raise RuntimeError(f"CHIP-8 fault: {exc}") from exc
        return executed

    def _dump_cpu(self, machine: VirtualMachine) -> None:
        registers = " ".join(f"V{index:X}={value:02X}" for index, value in enumerate(machine.registers))
        print(
            "CPU PC={:03X} I={:03X} SP={:X} OP={:04X} DT={:02X} ST={:02X}".format(
                machine.program_counter,
                machine.index,
                machine.stack_pointer,
                machine.current_opcode,
                machine.delay_timer,
                machine.sound_timer,
            )
        )
        print(registers)
