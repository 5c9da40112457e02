from functools import lru_cache
from typing import Optional
import logging

from fastapi import Depends, FastAPI, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from app.schemas import ErrorResponse, QuizEnvelope, QuizSource
from app.services.quiz_service import QuizService, build_llm
from app.services.stub_service import StubQuizService
from app.services.upload_service import UnsupportedFileTypeError, store_upload
from app.utils.config import get_settings, Settings

logger = logging.getLogger(__name__)

app = FastAPI()

@lru_cache
def get_quiz_generator():
    """Quiz generator for /generate: the Gemini-backed service, or the stub when configured"""
    settings = get_settings()
    if settings.use_stub_quiz:
        return StubQuizService(delay_seconds=settings.stub_delay_seconds)
    return QuizService(build_llm(settings), question_count=settings.quiz_question_count)

def error_response(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))

@app.post("/generate", response_model=QuizEnvelope)
async def generate(
    document: Optional[UploadFile] = File(None),
    source: QuizSource = Form(QuizSource.QUIZ),
    settings: Settings = Depends(get_settings),
    quiz_generator=Depends(get_quiz_generator),
):
    if document is None or not document.filename:
        return error_response(400, "No document uploaded")

    try:
        uploaded = await run_in_threadpool(store_upload, document, settings.upload_dir)
    except UnsupportedFileTypeError as e:
        logger.error(f"Rejected upload {document.filename} with type {e.mime_type}")
        return error_response(400, str(e))

    try:
        quiz = await quiz_generator.generate_quiz(uploaded, source)
    except Exception as e:
        logger.exception("Quiz generation error")
        return error_response(500, "Failed to generate quiz", str(e))

    return QuizEnvelope(filename=uploaded.original_name, quiz=quiz)
