"""Tests for trivia_quiz.config.Settings bounds."""

import pytest
from pydantic import ValidationError

from trivia_quiz.config import Settings


def test_defaults_are_valid():
    settings = Settings()
    assert settings.batch_size >= 1
    assert settings.request_timeout_seconds > 0


@pytest.mark.parametrize("field, value", [
    ("batch_size", 0),
    ("request_timeout_seconds", 0),
    ("request_timeout_seconds", -5),
    ("loading_tick_seconds", 0),
])
def test_out_of_range_values_are_rejected(field, value):
    with pytest.raises(ValidationError):
        Settings(**{field: value})
