import json
import re
import time
import logging
from fastapi.concurrency import run_in_threadpool
from langchain_core.prompts import PromptTemplate
from langchain_google_genai import ChatGoogleGenerativeAI
from pydantic import ValidationError

from app.schemas import Quiz, QuizSource, UploadedFile
from app.utils.config import Settings
from app.utils.file_processing import extract_text

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

FENCE_PATTERN = re.compile(r"```(?:json)?\n?")

MATERIAL_TEMPLATE = """
Based on the following document content, generate a quiz with {number} multiple-choice questions.
Return ONLY a valid JSON object with this exact structure (no markdown, no extra text):
{{
    "questions": [
        {{
            "question": "Question text here",
            "options": ["Option A", "Option B", "Option C", "Option D"],
            "correct": 0
        }}
    ]
}}

Document content:
{text}
"""

REFORMAT_TEMPLATE = """
You are a quiz formatter. Transform the following quiz content into a standardized JSON format.
The input may contain questions in various formats (numbered, lettered, mixed formatting).

Extract and format into this EXACT JSON structure (no markdown, no extra text):
{{
    "questions": [
        {{
            "question": "Question text here (without question number)",
            "options": ["Option A", "Option B", "Option C", "Option D"],
            "correct": 0
        }}
    ]
}}

Rules:
- Remove question numbers (1., 2., Q1, etc.)
- Convert all answer choices to options array (A, B, C, D or 1, 2, 3, 4)
- Set correct answer index (0 for A/1st, 1 for B/2nd, etc.)
- If correct answer is marked or indicated, use that index
- If no correct answer is marked, set correct: 0 as default
- Clean up formatting and extra whitespace
- Ensure exactly 4 options per question

Quiz content to transform:
{text}
"""

class QuizGenerationError(Exception):
    pass

class QuizParseError(QuizGenerationError):
    def __init__(self, message: str = "Failed to parse AI response as JSON"):
        super().__init__(message)

class QuizValidationError(QuizGenerationError):
    pass

def build_llm(settings: Settings) -> ChatGoogleGenerativeAI:
    """Create the Gemini chat model the quiz service talks to"""
    return ChatGoogleGenerativeAI(
        model=settings.llm_model,
        temperature=settings.llm_temperature,
        google_api_key=settings.google_api_key,
    )

def clean_completion(text: str) -> str:
    """Strip markdown code fences around a JSON completion"""
    return FENCE_PATTERN.sub("", text).strip()

def completion_text(message) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, list):
        # Gemini may answer with a list of content parts
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return content

def parse_quiz_payload(text: str) -> list[dict]:
    """Parse a cleaned completion and return its questions list"""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        logger.error(f"Cleaned text: {text}")
        raise QuizParseError()

    if not isinstance(payload, dict) or not isinstance(payload.get("questions"), list):
        logger.error(f"Unexpected quiz structure: {text}")
        raise QuizValidationError("AI response does not contain a questions list")
    return payload["questions"]

class QuizService:
    def __init__(self, llm, question_count: int = 5):
        self.llm = llm
        self.question_count = question_count
        self.setup_prompts()

    def setup_prompts(self):
        """Setup the two quiz prompt templates"""
        self.prompts = {
            QuizSource.MATERIAL: PromptTemplate(
                input_variables=["text", "number"],
                template=MATERIAL_TEMPLATE,
            ),
            QuizSource.QUIZ: PromptTemplate(
                input_variables=["text"],
                template=REFORMAT_TEMPLATE,
            ),
        }

    def build_prompt(self, text: str, source: QuizSource) -> str:
        prompt = self.prompts[source]
        if source is QuizSource.MATERIAL:
            return prompt.format(text=text, number=self.question_count)
        return prompt.format(text=text)

    async def synthesize(self, text: str, filename: str, source: QuizSource = QuizSource.QUIZ) -> Quiz:
        """Ask the model for a quiz over the given text and validate the answer"""
        prompt = self.build_prompt(text, source)
        logger.info(f"Requesting {source.value} quiz for {filename} ({len(text)} characters)")

        response = await self.llm.ainvoke(prompt)
        cleaned = clean_completion(completion_text(response))
        questions = parse_quiz_payload(cleaned)

        try:
            return Quiz.build(int(time.time() * 1000), filename, questions)
        except ValidationError as e:
            logger.error(f"Quiz validation failed: {e}")
            raise QuizValidationError(f"AI response has an invalid quiz structure: {e}")

    async def generate_quiz(self, document: UploadedFile, source: QuizSource = QuizSource.QUIZ) -> Quiz:
        text = await run_in_threadpool(extract_text, document.stored_path, document.original_name)
        return await self.synthesize(text, document.original_name, source)
