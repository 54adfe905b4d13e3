"""
测试公共 fixture
"""

from __future__ import annotations

import copy

import pytest

from examprint.models import Paper


SAMPLE_PAPER = {
    "examTitle": "Physics Unit Test",
    "subject": "Physics",
    "totalMarks": 20,
    "meta": {"durationMins": 45},
    "generalInstructions": ["All questions are compulsory.", "Use of calculators is not allowed."],
    "sections": [
        {
            "title": "Section A",
            "instructions": "Choose the correct option.",
            "marksPerQuestion": 1,
            "questions": [
                {
                    "text": "The SI unit of force is",
                    "type": "mcq",
                    "options": [{"text": "newton"}, {"text": "joule"}, {"text": "watt"}, {"text": "pascal"}],
                },
                {
                    "text": "Which of these is a vector?",
                    "type": "mcq",
                    "options": [{"text": "speed"}, {"text": "velocity"}],
                    "diagramUrl": "/uploads/vectors.png",
                },
            ],
        },
        {
            "title": "Section B",
            "questions": [
                {
                    "text": "Read the statements below.",
                    "type": "assertionreason",
                    "assertion": "A body at rest has no energy.",
                    "reason": "Kinetic energy depends on speed.",
                },
                {"text": "How many significant figures are in 0.0250?", "type": "integer", "integerAnswer": 3},
                {
                    "text": "Pick one",
                    "type": "mcq",
                    "options": [{"text": "x"}, {"text": "y"}, {"text": "z"}],
                },
            ],
        },
        {
            "title": "Section C",
            "marksPerQuestion": 5,
            "questions": [
                {"text": "Derive the equations of motion.", "type": "subjective"},
            ],
        },
    ],
}


@pytest.fixture
def paper_data() -> dict:
    return copy.deepcopy(SAMPLE_PAPER)


@pytest.fixture
def paper() -> Paper:
    return Paper.model_validate(SAMPLE_PAPER)
