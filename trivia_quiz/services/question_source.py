import logging
from time import perf_counter
from typing import Any, Dict, List
import requests
from pydantic import ValidationError
from ..config import settings
from ..errors import FetchError
from ..models import Question, TriviaResponse

logger = logging.getLogger("trivia_quiz")

def normalize_category(category: str | None) -> str | None:
    """Trimmed category text, or None when nothing meaningful was given."""
    if category is None:
        return None
    trimmed = category.strip()
    return trimmed or None

class TriviaQuestionSource:
    """Client for the trivia generation service, one question per request."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None, http: requests.Session | None = None) -> None:
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        self.http = http or requests.Session()
        self.headers = {"Content-Type": "application/json"}

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/trivia_quiz"

    def fetch_batch(self, category: str | None, count: int) -> List[Question]:
        """Fetch `count` questions sequentially.

        The first failing request aborts the batch and raises FetchError;
        questions already received are dropped along with it.
        """
        if count < 1:
            raise ValueError(f"count must be at least 1, got {count}")
        payload = self._build_payload(category)
        questions: List[Question] = []
        for position in range(count):
            questions.append(self._fetch_one(payload, position))
        logger.debug({"event": "batch_fetched", "count": len(questions), "category": payload["category"] if payload else None})
        return questions

    def _build_payload(self, category: str | None) -> Dict[str, Any] | None:
        category = normalize_category(category)
        if category is None:
            return None
        return {"category": category}

    def _fetch_one(self, payload: Dict[str, Any] | None, position: int) -> Question:
        t0 = perf_counter()
        try:
            # json=None leaves the request without a body
            response = self.http.post(self.endpoint, headers=self.headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning({"event": "trivia_request_failed", "position": position, "error": repr(e)})
            raise FetchError(f"request {position + 1} failed: {e}") from e
        latency_ms = int((perf_counter() - t0) * 1000)
        logger.debug({"event": "trivia_response", "position": position, "status_code": response.status_code, "latency_ms": latency_ms})
        if not 200 <= response.status_code < 300:
            raise FetchError(f"request {position + 1} returned status {response.status_code} {response.reason}")
        try:
            body = response.json()
        except ValueError as e:
            logger.warning({"event": "trivia_body_not_json", "position": position, "preview": response.text[:200]})
            raise FetchError(f"request {position + 1} returned a body that is not JSON") from e
        try:
            return TriviaResponse.model_validate(body).item.to_question()
        except ValidationError as e:
            logger.warning({"event": "trivia_body_malformed", "position": position, "errors": e.errors(include_url=False)})
            raise FetchError(f"request {position + 1} returned a malformed question") from e
