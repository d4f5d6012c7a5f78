"""
Shared CLI state and helpers.

The root callback in cli.app stores a CliState on the typer context;
commands fetch it with get_state(ctx).
"""

import logging
from dataclasses import dataclass, field
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import IntPrompt

from midilink.config import MidiConfig, load_config
from midilink.devices.base import MidiDevice, MidiInput, MidiOutput
from midilink.devices.registry import Backend, get_backend, midi_in, midi_out, midi_sinks, midi_sources
from midilink.errors import DeviceNotFoundError, MidiError
from midilink.scheduler.pool import SchedulerPool

console = Console()
err_console = Console(stderr=True)


@dataclass
class CliState:
    """Configuration and backend for one CLI invocation."""

    config: MidiConfig
    backend: Backend
    _scheduler: Optional[SchedulerPool] = field(default=None, repr=False)

    @property
    def scheduler(self) -> SchedulerPool:
        """Scheduler pool sized from the configuration, created on first use."""
        if self._scheduler is None:
            self._scheduler = SchedulerPool(self.config.workers, name="midilink-cli")
        return self._scheduler

    def finish(self, timeout: Optional[float] = None) -> None:
        """Let scheduled events play out, then stop the pool."""
        if self._scheduler is not None:
            self._scheduler.wait_idle(timeout)
            self._scheduler.shutdown()


def setup_logging(verbose: bool = False) -> None:
    """Route library logging through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def build_state(config_path: Optional[str] = None, backend: Optional[str] = None) -> CliState:
    config = load_config(config_path)
    if backend:
        config.backend = backend
    return CliState(config=config, backend=get_backend(config.backend))


def get_state(ctx: typer.Context) -> CliState:
    """Return the state created by the root callback."""
    state = ctx.find_root().obj
    if state is None:
        state = build_state()
        ctx.find_root().obj = state
    return state


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    err_console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(code=1)


def choose_device(title: str, devices: List[MidiDevice]) -> MidiDevice:
    """Ask the user to pick one device from a numbered list."""
    if not devices:
        fail(f"No devices available for {title.lower()}")

    console.print(f"[bold]{title}[/bold]")
    for i, device in enumerate(devices):
        console.print(f"  [{i}] {device.info}")

    index = IntPrompt.ask("Device", choices=[str(i) for i in range(len(devices))], default=0)
    return devices[index]


def open_input(state: CliState, pattern: Optional[str]) -> MidiInput:
    """Open the input matching pattern, the configured input, or a chosen one."""
    pattern = pattern or state.config.input
    try:
        if pattern:
            source = midi_in(pattern, state.backend)
        else:
            source = midi_in(choose_device("MIDI Input Selector", midi_sources(state.backend)))
        if source is None:
            raise DeviceNotFoundError(f"No MIDI input matches {pattern!r}")
    except MidiError as e:
        fail(str(e))
    return source


def open_output(state: CliState, pattern: Optional[str]) -> MidiOutput:
    """Open the output matching pattern, the configured output, or a chosen one."""
    pattern = pattern or state.config.output
    try:
        if pattern:
            sink = midi_out(pattern, state.backend)
        else:
            sink = midi_out(choose_device("MIDI Output Selector", midi_sinks(state.backend)))
        if sink is None:
            raise DeviceNotFoundError(f"No MIDI output matches {pattern!r}")
    except MidiError as e:
        fail(str(e))
    return sink


def parse_int_list(text: str, name: str) -> List[int]:
    """Parse '60,64,67' (commas or spaces) into integers."""
    try:
        return [int(part) for part in text.replace(",", " ").split()]
    except ValueError:
        fail(f"{name} must be a list of integers, got {text!r}")
