from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    google_api_key: Optional[str] = None
    llm_model: str = "gemini-2.5-flash"
    llm_temperature: float = 0.7
    quiz_question_count: int = 5
    upload_dir: str = "uploads"
    use_stub_quiz: bool = False
    stub_delay_seconds: float = 2.0

    class Config:
        env_file = ".env"

@lru_cache
def get_settings() -> Settings:
    return Settings()
