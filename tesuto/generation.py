"""Генерация домашних заданий.

Сервис генерации описан интерфейсом ProblemGenerator: запрос (предмет, тема,
сложность, количество) -> список задач. Вызов асинхронный и ограничен таймаутом,
результат имеет явное состояние (успех, таймаут, ошибка).

Поставляемая реализация CannedProblemGenerator отдаёт заранее заготовленные
задачи с искусственной задержкой.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, List, Dict

from pydantic import BaseModel, Field

from .config import GENERATION_DELAY, GENERATION_TIMEOUT
from .models import Difficulty

logger = logging.getLogger(__name__)

class GenerationDifficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    MIXED = "mixed"


class GenerationError(Exception):
    pass


class GenerationRequest(BaseModel):
    subject: str
    topic: Optional[str] = None
    difficulty: GenerationDifficulty = GenerationDifficulty.MIXED
    count: int = Field(default=5, ge=1, le=20)
    instructions: Optional[str] = None


class GeneratedProblem(BaseModel):
    question: str
    answer: Optional[str] = None
    difficulty: Difficulty
    topic: str

    def to_problem_payload(self) -> Dict[str, Optional[str]]:
        return {"question": self.question, "answer": self.answer, "difficulty": self.difficulty.value}


class GenerationStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


class GenerationResult(BaseModel):
    status: GenerationStatus = GenerationStatus.PENDING
    problems: List[GeneratedProblem] = []
    error: Optional[str] = None


class ProblemGenerator(ABC):
    @abstractmethod
    async def generate(self, request: GenerationRequest) -> List[GeneratedProblem]:
        ...


def _p(question, answer, difficulty, topic):
    return GeneratedProblem(question=question, answer=answer, difficulty=difficulty, topic=topic)


CANNED_PROBLEMS: Dict[str, List[GeneratedProblem]] = {
    "mathematics": [
        _p("Solve the quadratic equation: x² + 5x + 6 = 0", "x = -2 or x = -3",
           Difficulty.EASY, "Algebra"),
        _p("Find the derivative of f(x) = 3x³ - 2x² + 5x - 7", "f'(x) = 9x² - 4x + 5",
           Difficulty.MEDIUM, "Calculus"),
        _p("Calculate the area of a triangle with sides 5, 12, and 13 units.", "30 square units",
           Difficulty.EASY, "Geometry"),
        _p("If sin(θ) = 3/5 and θ is in the first quadrant, find cos(θ).", "cos(θ) = 4/5",
           Difficulty.MEDIUM, "Trigonometry"),
        _p("Evaluate the integral: ∫(2x + 3)dx from 0 to 4", "28",
           Difficulty.HARD, "Calculus"),
    ],
    "physics": [
        _p("A car accelerates from rest at 2 m/s². How far does it travel in 5 seconds?", "25 meters",
           Difficulty.EASY, "Mechanics"),
        _p("Calculate the work done when a force of 10N moves an object 5m in the direction of the force.",
           "50 Joules", Difficulty.EASY, "Mechanics"),
        _p("A 2kg object is heated from 20°C to 80°C. If specific heat capacity is 500 J/kg·K, "
           "find the heat energy required.", "60,000 Joules", Difficulty.MEDIUM, "Thermodynamics"),
        _p("Calculate the focal length of a convex lens that forms an image at 30cm "
           "when the object is at 15cm.", "10 cm", Difficulty.HARD, "Optics"),
        _p("Find the electric field at a distance of 2m from a point charge of 4μC.", "9 × 10³ N/C",
           Difficulty.MEDIUM, "Electromagnetism"),
    ],
}

SUBJECT_ALIASES = {"math": "mathematics", "maths": "mathematics"}


class CannedProblemGenerator(ProblemGenerator):
    """Заглушка вместо внешнего сервиса генерации"""

    def __init__(self, delay: float = GENERATION_DELAY, catalogue: Optional[Dict[str, List[GeneratedProblem]]] = None):
        self.delay = delay
        self.catalogue = catalogue if catalogue is not None else CANNED_PROBLEMS

    async def generate(self, request: GenerationRequest) -> List[GeneratedProblem]:
        await asyncio.sleep(self.delay)

        key = request.subject.strip().lower()
        key = SUBJECT_ALIASES.get(key, key)
        problems = self.catalogue.get(key)
        if problems is None:
            raise GenerationError(f"No problems available for subject '{request.subject}'")

        if request.topic:
            problems = [p for p in problems if p.topic.lower() == request.topic.strip().lower()]
        if request.difficulty != GenerationDifficulty.MIXED:
            problems = [p for p in problems if p.difficulty.value == request.difficulty.value.upper()]

        return problems[:request.count]


async def run_generation(
        generator: ProblemGenerator,
        request: GenerationRequest,
        timeout: float = GENERATION_TIMEOUT
) -> GenerationResult:
    try:
        problems = await asyncio.wait_for(generator.generate(request), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Generation for '{request.subject}' timed out after {timeout}s")
        return GenerationResult(status=GenerationStatus.TIMED_OUT, error=f"Generation timed out after {timeout}s")
    except GenerationError as e:
        logger.warning(f"Generation for '{request.subject}' failed: {e}")
        return GenerationResult(status=GenerationStatus.FAILED, error=str(e))
    except Exception as e:
        logger.exception(f"Generator crashed for '{request.subject}'")
        return GenerationResult(status=GenerationStatus.FAILED, error=f"Unexpected generator error: {e}")

    logger.info(f"Generated {len(problems)} problems for '{request.subject}'")
    return GenerationResult(status=GenerationStatus.SUCCEEDED, problems=problems)


def generate_sync(
        generator: ProblemGenerator,
        request: GenerationRequest,
        timeout: float = GENERATION_TIMEOUT
) -> GenerationResult:
    return asyncio.run(run_generation(generator, request, timeout))
