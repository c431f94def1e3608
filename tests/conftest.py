"""Shared fakes for the quiz tests: canned HTTP responses and question sources."""

import json

import pytest
import requests

from trivia_quiz.errors import FetchError
from trivia_quiz.models import Question


def make_question(prompt="Q1", choices=("A", "B"), correct_index=1, explanation="E"):
    return Question(prompt=prompt, choices=list(choices), correct_index=correct_index, explanation=explanation)


def make_response(status_code=200, body=None, raw=None, reason="OK"):
    """Build a real requests.Response carrying a JSON body (or raw bytes)."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.encoding = "utf-8"
    if raw is not None:
        response._content = raw
    else:
        response._content = json.dumps(body).encode("utf-8")
    return response


def item_body(quiz="Q1", choices=("A", "B"), answer=1, explanation="E"):
    return {"item": {"quiz": quiz, "choices": list(choices), "answer": answer, "explanation": explanation}}


class FakeHttp:
    """Stands in for requests.Session, replaying queued responses in order."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def post(self, url, headers=None, json=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeSource:
    """Question source returning a fixed batch, or failing with FetchError."""

    def __init__(self, questions=None, error=None):
        self.questions = questions if questions is not None else [make_question()]
        self.error = error
        self.calls = []

    def fetch_batch(self, category, count):
        self.calls.append((category, count))
        if self.error is not None:
            raise self.error
        return list(self.questions[:count])


@pytest.fixture
def source():
    return FakeSource()


@pytest.fixture
def failing_source():
    return FakeSource(error=FetchError("request 2 returned status 500 Internal Server Error"))
