"""Tests for driver loop pacing."""

from __future__ import annotations

import pytest

from pychip8.system import StepScheduler


def test_whole_steps_for_elapsed_time() -> None:
    scheduler = StepScheduler(steps_per_second=600)

    assert scheduler.steps_for(0.5) == 300


def test_fractional_steps_carry_over() -> None:
    scheduler = StepScheduler(steps_per_second=500)

    counts = [scheduler.steps_for(1 / 60) for _ in range(60)]

    assert sum(counts) in (499, 500)
    assert set(counts) <= {8, 9}


def test_non_positive_elapsed_runs_nothing() -> None:
    scheduler = StepScheduler(steps_per_second=600)

    assert scheduler.steps_for(0.0) == 0
    assert scheduler.steps_for(-1.0) == 0


def test_backlog_is_capped() -> None:
    scheduler = StepScheduler(steps_per_second=1_000, max_steps_per_call=50)

    assert scheduler.steps_for(10.0) == 50
    assert scheduler.steps_for(0.01) == 10


def test_invalid_rates_rejected() -> None:
    with pytest.raises(ValueError):
        StepScheduler(steps_per_second=0)
    with pytest.raises(ValueError):
        StepScheduler(max_steps_per_call=0)
