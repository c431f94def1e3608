from fastapi import FastAPI, Request, BackgroundTasks
from fastapi.responses import ORJSONResponse
from fastapi.middleware.cors import CORSMiddleware
import logging
from time import perf_counter
from datetime import datetime, timezone
from .state import QuizSession, QuizStore, FETCH_ERROR_MESSAGE
from .models import CategoryTextRequest, LifecycleState, QuizView, SelectChoiceRequest, StartQuizRequest
from .errors import InvalidInput
from .services.question_source import TriviaQuestionSource
from .services.loading_indicator import LoadingDots
from .config import settings

logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger("trivia_quiz")

app = FastAPI(default_response_class=ORJSONResponse)

app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

store = QuizStore(TriviaQuestionSource())
loading = LoadingDots()

def load_questions(session: QuizSession) -> None:
	"""Background task resolving the batch requested by start"""
	try:
		ok = store.fetch(session)
		logger.debug({"event": "fetch_resolved", "ok": ok, "state": session.state.value})
	except Exception:
		logger.exception("question_fetch_crashed")
		with store.lock:
			if session.state is LifecycleState.FETCHING:
				session.on_fetch_failure(FETCH_ERROR_MESSAGE)
	finally:
		with store.lock:
			# a later session may already own the ticker
			if store.session is session:
				loading.stop()

def current_view() -> QuizView:
	with store.lock:
		view = QuizView.model_validate(store.session.snapshot().model_dump())
		if store.session.state is LifecycleState.FETCHING:
			view.loading_text = loading.text
		elif store.session.state is LifecycleState.CHOOSING_CATEGORY:
			view.category_draft = store.category_draft
	return view

@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
	logger.debug({"event": "intent_rejected", "path": request.url.path, "reason": str(exc)})
	return ORJSONResponse(status_code=409, content={"detail": str(exc)})

@app.on_event("startup")
def on_startup() -> None:
	logger.info({
		"event": "api_startup",
		"utc_time": datetime.now(timezone.utc).isoformat(),
		"base_url": settings.base_url,
		"batch_size": settings.batch_size,
	})

@app.middleware("http")
async def timing_middleware(request: Request, call_next):
	start = perf_counter()
	response = await call_next(request)
	duration_ms = int((perf_counter() - start) * 1000)
	logger.debug({
		"event": "request_timing",
		"method": request.method,
		"path": request.url.path,
		"status_code": response.status_code,
		"duration_ms": duration_ms,
	})
	return response

@app.get("/api/quiz", response_model=QuizView)
def get_quiz():
	return current_view()

@app.post("/api/quiz/category/begin", response_model=QuizView)
def begin_category_selection():
	with store.lock:
		store.session.begin_category_selection()
	return current_view()

@app.post("/api/quiz/category/cancel", response_model=QuizView)
def cancel_category_selection():
	store.cancel_category_selection()
	return current_view()

@app.put("/api/quiz/category/text", response_model=QuizView)
def set_category_text(payload: CategoryTextRequest):
	store.set_category_draft(payload.text)
	return current_view()

@app.post("/api/quiz/start", response_model=QuizView)
def start_quiz(background_tasks: BackgroundTasks, payload: StartQuizRequest | None = None):
	with store.lock:
		session = store.start(payload.category if payload else None)
		loading.start()
	background_tasks.add_task(load_questions, session)
	logger.debug({"event": "quiz_started", "category": session.category, "batch_size": session.batch_size})
	return current_view()

@app.post("/api/quiz/select", response_model=QuizView)
def select_choice(payload: SelectChoiceRequest):
	with store.lock:
		store.session.select_choice(payload.index)
	return current_view()

@app.post("/api/quiz/submit", response_model=QuizView)
def submit_answer():
	with store.lock:
		store.session.submit_answer()
	return current_view()

@app.post("/api/quiz/continue", response_model=QuizView)
def continue_quiz():
	with store.lock:
		store.session.advance()
	return current_view()

@app.post("/api/quiz/restart", response_model=QuizView)
def restart_quiz():
	store.restart()
	logger.debug({"event": "quiz_restarted"})
	return current_view()
