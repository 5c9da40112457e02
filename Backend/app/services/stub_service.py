import asyncio
import time
import logging

from app.schemas import Quiz, QuizSource, UploadedFile

logger = logging.getLogger(__name__)

PLACEHOLDER_QUESTIONS = [
    {
        "question": "What is the main topic of the uploaded document?",
        "options": ["History", "Science", "Literature", "Mathematics"],
        "correct": 1,
    },
    {
        "question": "Which of these is a key concept discussed in the document?",
        "options": ["Photosynthesis", "Gravity", "Evolution", "Electricity"],
        "correct": 0,
    },
    {
        "question": "What conclusion does the document reach?",
        "options": [
            "The hypothesis was confirmed",
            "The hypothesis was rejected",
            "More research is needed",
            "No conclusion is given",
        ],
        "correct": 2,
    },
]

class StubQuizService:
    """Returns a fixed placeholder quiz without reading the document or calling a model"""

    def __init__(self, delay_seconds: float = 2.0):
        self.delay_seconds = delay_seconds

    async def generate_quiz(self, document: UploadedFile, source: QuizSource = QuizSource.QUIZ) -> Quiz:
        logger.info(f"Serving placeholder quiz for {document.original_name}")
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        return Quiz.build(int(time.time() * 1000), document.original_name, PLACEHOLDER_QUESTIONS)
