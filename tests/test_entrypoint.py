"""Tests for the `trivia-quiz` console entry point."""

import trivia_quiz.__main__ as entrypoint


def test_main_serves_the_api_with_uvicorn(monkeypatch):
    calls = []
    monkeypatch.setattr(entrypoint.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    entrypoint.main()
    assert calls == [("trivia_quiz.main:app", {"host": entrypoint.settings.host, "port": entrypoint.settings.port})]
