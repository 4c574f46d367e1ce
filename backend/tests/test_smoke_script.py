"""
Tests for the smoke test script's server handling.
"""

import subprocess

from scripts import smoke_test


def test_server_output_is_not_left_in_unread_pipes(monkeypatch):
    """Request logs must not back up into pipes nobody drains."""
    launched = {}

    class FakePopen:
        def __init__(self, args, **kwargs):
            launched["args"] = args
            launched["kwargs"] = kwargs

    monkeypatch.setattr(smoke_test.subprocess, "Popen", FakePopen)

    smoke_test.start_server()

    assert "uvicorn" in launched["args"]
    assert launched["kwargs"]["stdout"] is subprocess.DEVNULL
    assert launched["kwargs"]["stderr"] is subprocess.DEVNULL
