import logging
import threading
from typing import List, Optional
from .config import settings
from .errors import FetchError, InvalidInput
from .models import IN_PROGRESS_STATES, LifecycleState, Question, QuestionView, SessionView
from .services.question_source import TriviaQuestionSource, normalize_category

logger = logging.getLogger("trivia_quiz")

FETCH_ERROR_MESSAGE = "An error occurred while loading the quiz. Please restart and try again."

class QuizSession:
	"""One quiz run, from the start screen to the final score.

	All mutation goes through the transition methods; each one raises
	InvalidInput and leaves the session untouched when called out of turn.
	A finished or failed session is never reset, restart() hands back a new one.
	"""

	def __init__(self, source: TriviaQuestionSource, batch_size: int | None = None) -> None:
		self.source = source
		self.batch_size = batch_size if batch_size is not None else settings.batch_size
		if self.batch_size < 1:
			raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")
		self.state = LifecycleState.NOT_STARTED
		self.questions: List[Question] = []
		self.current_index = 0
		self.selected_choice: Optional[int] = None
		self.score = 0
		self.category: Optional[str] = None
		self.error: Optional[str] = None
		self.answers: List[bool] = []
		self._fetch_issued = False

	@property
	def in_progress(self) -> bool:
		return self.state in IN_PROGRESS_STATES

	@property
	def current_question(self) -> Optional[Question]:
		if not self.in_progress:
			return None
		return self.questions[self.current_index]

	def _require(self, *states: LifecycleState, action: str) -> None:
		if self.state not in states:
			raise InvalidInput(f"cannot {action} while {self.state.value}")

	def _transition(self, new_state: LifecycleState) -> None:
		logger.debug({"event": "state_transition", "from": self.state.value, "to": new_state.value, "index": self.current_index, "score": self.score})
		self.state = new_state

	def begin_category_selection(self) -> None:
		self._require(LifecycleState.NOT_STARTED, LifecycleState.CHOOSING_CATEGORY, action="choose a category")
		if self.state is LifecycleState.NOT_STARTED:
			self._transition(LifecycleState.CHOOSING_CATEGORY)

	def cancel_category_selection(self) -> None:
		self._require(LifecycleState.CHOOSING_CATEGORY, action="cancel category selection")
		self._transition(LifecycleState.NOT_STARTED)

	def start(self, category: str | None = None) -> None:
		self._require(LifecycleState.NOT_STARTED, LifecycleState.CHOOSING_CATEGORY, action="start")
		category = normalize_category(category)
		if self.state is LifecycleState.CHOOSING_CATEGORY and category is None:
			raise InvalidInput("category must not be empty")
		self.category = category
		self._transition(LifecycleState.FETCHING)

	def claim_fetch(self) -> None:
		"""Mark the single batch of this session as issued."""
		self._require(LifecycleState.FETCHING, action="fetch questions")
		if self._fetch_issued:
			raise InvalidInput("questions are already being fetched")
		self._fetch_issued = True

	def request_batch(self) -> List[Question] | FetchError:
		"""Perform the network part of the fetch without touching session state."""
		try:
			return self.source.fetch_batch(self.category, self.batch_size)
		except FetchError as e:
			return e

	def resolve_fetch(self, outcome: List[Question] | FetchError) -> bool:
		"""Apply the result of request_batch. Returns True when questions arrived."""
		if isinstance(outcome, FetchError):
			logger.warning({"event": "fetch_failed", "category": self.category, "reason": str(outcome)})
			self.on_fetch_failure(FETCH_ERROR_MESSAGE)
			return False
		self.on_fetch_success(outcome)
		return True

	def run_fetch(self) -> bool:
		self.claim_fetch()
		return self.resolve_fetch(self.request_batch())

	def on_fetch_success(self, questions: List[Question]) -> None:
		self._require(LifecycleState.FETCHING, action="accept questions")
		if len(questions) != self.batch_size:
			raise InvalidInput(f"expected {self.batch_size} questions, got {len(questions)}")
		if not all(isinstance(q, Question) for q in questions):
			raise InvalidInput("questions must be Question records")
		self.questions = list(questions)
		self.current_index = 0
		self.score = 0
		self.selected_choice = None
		self._transition(LifecycleState.AWAITING_SELECTION)

	def on_fetch_failure(self, reason: str) -> None:
		self._require(LifecycleState.FETCHING, action="report a fetch failure")
		self.questions = []
		self.error = reason
		self._transition(LifecycleState.ERROR)

	def select_choice(self, index: int) -> None:
		self._require(LifecycleState.AWAITING_SELECTION, LifecycleState.AWAITING_SUBMIT, action="select a choice")
		choices = self.questions[self.current_index].choices
		if isinstance(index, bool) or not 0 <= index < len(choices):
			raise InvalidInput(f"choice {index} is not between 0 and {len(choices) - 1}")
		self.selected_choice = index
		if self.state is LifecycleState.AWAITING_SELECTION:
			self._transition(LifecycleState.AWAITING_SUBMIT)

	def submit_answer(self) -> bool:
		if self.state is LifecycleState.AWAITING_SELECTION:
			raise InvalidInput("select a choice before submitting")
		self._require(LifecycleState.AWAITING_SUBMIT, action="submit an answer")
		question = self.questions[self.current_index]
		is_correct = self.selected_choice == question.correct_index
		if is_correct:
			self.score += 1
		self.answers.append(is_correct)
		logger.debug({"event": "answer_submitted", "index": self.current_index, "selected": self.selected_choice, "correct_index": question.correct_index, "is_correct": is_correct})
		self._transition(LifecycleState.SHOWING_EXPLANATION)
		return is_correct

	def advance(self) -> None:
		self._require(LifecycleState.SHOWING_EXPLANATION, action="continue")
		self.selected_choice = None
		if self.current_index + 1 < len(self.questions):
			self.current_index += 1
			self._transition(LifecycleState.AWAITING_SELECTION)
		else:
			self.current_index = len(self.questions)
			self._transition(LifecycleState.FINISHED)
			logger.info({"event": "quiz_finished", "score": self.score, "total": len(self.questions), "category": self.category})

	def restart(self) -> "QuizSession":
		self._require(LifecycleState.FINISHED, LifecycleState.ERROR, action="restart")
		return QuizSession(self.source, self.batch_size)

	def snapshot(self) -> SessionView:
		view = SessionView(
			state=self.state,
			total_questions=len(self.questions),
			selected_choice=self.selected_choice,
			score=self.score,
			category=self.category,
			last_answer_correct=self.answers[-1] if self.state is LifecycleState.SHOWING_EXPLANATION else None,
			error=self.error,
		)
		question = self.current_question
		if question is not None:
			view.question_number = self.current_index + 1
			view.question = QuestionView(prompt=question.prompt, choices=list(question.choices))
			if self.state is LifecycleState.SHOWING_EXPLANATION:
				view.question.correct_index = question.correct_index
				view.question.correct_choice = question.choices[question.correct_index]
				view.question.explanation = question.explanation
		return view

class QuizStore:
	"""Holds the single live session together with the presentation-side draft text."""

	def __init__(self, source: TriviaQuestionSource, batch_size: int | None = None) -> None:
		self.lock = threading.RLock()
		self.session = QuizSession(source, batch_size)
		self.category_draft = ""

	def set_category_draft(self, text: str) -> None:
		with self.lock:
			if self.session.state is not LifecycleState.CHOOSING_CATEGORY:
				raise InvalidInput("category text can only be edited while choosing a category")
			self.category_draft = text

	def cancel_category_selection(self) -> None:
		with self.lock:
			self.session.cancel_category_selection()
			self.category_draft = ""

	def start(self, category: str | None) -> QuizSession:
		with self.lock:
			if category is None and self.session.state is LifecycleState.CHOOSING_CATEGORY:
				category = self.category_draft
			self.session.start(category)
			self.category_draft = ""
			return self.session

	def fetch(self, session: QuizSession) -> bool:
		# requests run outside the lock, only claiming and resolving are serialised
		with self.lock:
			session.claim_fetch()
		outcome = session.request_batch()
		with self.lock:
			return session.resolve_fetch(outcome)

	def restart(self) -> QuizSession:
		with self.lock:
			self.session = self.session.restart()
			self.category_draft = ""
			return self.session
