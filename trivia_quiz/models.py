from enum import Enum
from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, model_validator
from typing import List, Optional

class LifecycleState(str, Enum):
    NOT_STARTED = "not_started"
    CHOOSING_CATEGORY = "choosing_category"
    FETCHING = "fetching"
    ERROR = "error"
    AWAITING_SELECTION = "awaiting_selection"
    AWAITING_SUBMIT = "awaiting_submit"
    SHOWING_EXPLANATION = "showing_explanation"
    FINISHED = "finished"

IN_PROGRESS_STATES = frozenset({
    LifecycleState.AWAITING_SELECTION,
    LifecycleState.AWAITING_SUBMIT,
    LifecycleState.SHOWING_EXPLANATION,
})

class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt: str
    choices: List[str]
    correct_index: int
    explanation: str

    @model_validator(mode="after")
    def _check_choices(self) -> "Question":
        if len(self.choices) < 2:
            raise ValueError("a question needs at least two choices")
        if not 0 <= self.correct_index < len(self.choices):
            raise ValueError(f"correct_index {self.correct_index} is outside the {len(self.choices)} choices")
        return self

class TriviaItem(BaseModel):
    """Question as returned by the generation service."""
    quiz: StrictStr
    choices: List[StrictStr]
    # "1", true and 1.0 are not indexes
    answer: StrictInt
    explanation: StrictStr

    def to_question(self) -> Question:
        return Question(prompt=self.quiz, choices=self.choices, correct_index=self.answer, explanation=self.explanation)

class TriviaResponse(BaseModel):
    item: TriviaItem

class QuestionView(BaseModel):
    prompt: str
    choices: List[str]
    # only revealed once the answer has been submitted
    correct_index: Optional[int] = None
    correct_choice: Optional[str] = None
    explanation: Optional[str] = None

class SessionView(BaseModel):
    state: LifecycleState
    question: Optional[QuestionView] = None
    question_number: Optional[int] = None
    total_questions: int = 0
    selected_choice: Optional[int] = None
    score: int = 0
    category: Optional[str] = None
    last_answer_correct: Optional[bool] = None
    error: Optional[str] = None

class QuizView(SessionView):
    loading_text: Optional[str] = None
    category_draft: Optional[str] = None

class CategoryTextRequest(BaseModel):
    text: str = ""

class StartQuizRequest(BaseModel):
    category: Optional[str] = None

class SelectChoiceRequest(BaseModel):
    index: int
