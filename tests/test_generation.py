"""Tests for the homework generation service."""
import asyncio

import pytest

from tesuto.generation import (
    CannedProblemGenerator, GenerationRequest, GenerationStatus, ProblemGenerator,
    run_generation, generate_sync,
)
from tesuto.models import Difficulty


@pytest.fixture
def generator():
    return CannedProblemGenerator(delay=0)


def test_returns_requested_count(generator):
    result = generate_sync(generator, GenerationRequest(subject="math", count=3))
    assert result.status == GenerationStatus.SUCCEEDED
    assert len(result.problems) == 3


def test_filters_by_difficulty(generator):
    result = generate_sync(generator, GenerationRequest(subject="physics", difficulty="easy"))
    assert result.problems
    assert all(p.difficulty == Difficulty.EASY for p in result.problems)


def test_filters_by_topic(generator):
    result = generate_sync(generator, GenerationRequest(subject="Mathematics", topic="calculus"))
    assert [p.topic for p in result.problems] == ["Calculus", "Calculus"]


def test_unknown_subject_fails(generator):
    result = generate_sync(generator, GenerationRequest(subject="history"))
    assert result.status == GenerationStatus.FAILED
    assert "history" in result.error
    assert result.problems == []


def test_timeout():
    class SlowGenerator(ProblemGenerator):
        async def generate(self, request):
            await asyncio.sleep(1)
            return []

    result = generate_sync(SlowGenerator(), GenerationRequest(subject="math"), timeout=0.01)
    assert result.status == GenerationStatus.TIMED_OUT


def test_count_limits():
    with pytest.raises(ValueError):
        GenerationRequest(subject="math", count=0)
    with pytest.raises(ValueError):
        GenerationRequest(subject="math", count=21)


def test_problem_payload(generator):
    problem = asyncio.run(run_generation(generator, GenerationRequest(subject="math", count=1))).problems[0]
    payload = problem.to_problem_payload()
    assert payload["question"] == problem.question
    assert payload["difficulty"] == "EASY"


def test_unknown_difficulty_rejected():
    with pytest.raises(ValueError):
        GenerationRequest(subject="math", difficulty="hrad")


def test_unexpected_generator_error_is_reported_as_failure():
    class BrokenGenerator(ProblemGenerator):
        async def generate(self, request):
            raise RuntimeError("upstream returned garbage")

    result = generate_sync(BrokenGenerator(), GenerationRequest(subject="math"))
    assert result.status == GenerationStatus.FAILED
    assert "upstream returned garbage" in result.error
    assert result.problems == []
