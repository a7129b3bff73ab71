"""Fixed-rate pacing for the CHIP-8 driver loop."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_STEPS_PER_SECOND = 600


@dataclass
class StepScheduler:
    """Convert elapsed wall-clock time into a whole number of machine steps.

    The fractional remainder carries over between calls so the long-run rate
    matches ``steps_per_second`` regardless of the display frame rate.
    """

    steps_per_second: int = DEFAULT_STEPS_PER_SECOND
    max_steps_per_call: int = 1_000
    _carry: float = field(default=0.0, repr=False)

    def __post_init__(self) -> None:
        if self.steps_per_second <= 0:
            raise ValueError("steps_per_second must be positive")
        if self.max_steps_per_call <= 0:
            raise ValueError("max_steps_per_call must be positive")

    def steps_for(self, elapsed: float) -> int:
        if elapsed <= 0:
            return 0
        budget = self._carry + elapsed * self.steps_per_second
        steps = int(budget)
        if steps > self.max_steps_per_call:
            # Backlog after a stall is dropped, not replayed.
            self._carry = 0.0
            return self.max_steps_per_call
        self._carry = budget - steps
        return steps

    def reset(self) -> None:
        self._carry = 0.0
