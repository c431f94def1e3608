import os
from pydantic import BaseModel, ConfigDict, Field
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseModel):
    model_config = ConfigDict(validate_default=True)

    base_url: str = os.getenv("LLM_INTERACTION_API_URL", "http://localhost:8000")
    # number of questions per quiz session
    batch_size: int = Field(default=int(os.getenv("QUIZ_BATCH_SIZE", "3")), ge=1)
    request_timeout_seconds: float = Field(default=float(os.getenv("QUIZ_REQUEST_TIMEOUT", "30")), gt=0)
    loading_tick_seconds: float = Field(default=float(os.getenv("QUIZ_LOADING_TICK", "0.5")), gt=0)
    host: str = os.getenv("QUIZ_HOST", "127.0.0.1")
    port: int = int(os.getenv("QUIZ_PORT", "8000"))

settings = Settings()
