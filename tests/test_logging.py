"""Tests for console logging and the tick progress bar."""

import jax
from chip8vm import load, run_ticks
from chip8vm.logging import ConsoleLogger
from conftest import program


def test_logger_filters_below_threshold(capsys):
    logger = ConsoleLogger(log_level="INFO", show_timestamps=False)

    logger.debug("hidden")
    logger.info("shown")
    logger.error("also shown")

    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "[    INFO][chip8vm] shown" in out
    assert "[   ERROR][chip8vm] also shown" in out


def test_progress_bar_reports_halt(fresh_state, capsys):
    state = load(fresh_state, program(0x6001, 0x5000)).unwrap()

    _, info = run_ticks(state, 4, True)
    assert int(info.ticks) == 1
    jax.effects_barrier()

    err = capsys.readouterr().err
    assert "ticks=1" in err
    assert "halted=True" in err
