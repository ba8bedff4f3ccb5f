"""
Tests for the command-line entry point.
"""
import asyncio
import logging

from microfx.config.settings import Settings
from microfx.main import run_headless


def test_headless_demo_runs_to_completion(caplog):
    """Test that the scripted demo plays every effect and leaves no timelines."""
    with caplog.at_level(logging.INFO, logger="microfx.main"):
        asyncio.run(run_headless(Settings(_env_file=None)))

    messages = [record.getMessage() for record in caplog.records if record.name == "microfx.main"]
    assert any(message.startswith("EFFECT_STARTED: pulse") for message in messages)
    assert any(message.startswith("EFFECT_STOPPED") for message in messages)
    assert messages[-1].endswith("live timelines=0")
