"""
CBT Toolkit Core Package

Shared data models, record schemas and the compact serialization codec.
Everything in this package is pure and synchronous; persistence lives in
``cbt_toolkit.ledger``.
"""

from .models import (
    ExamConfig,
    ExamDefinition,
    ExamResult,
    Question,
    QuestionPerformance,
    QuestionType,
)

__all__ = [
    "ExamConfig",
    "ExamDefinition",
    "ExamResult",
    "Question",
    "QuestionPerformance",
    "QuestionType",
]
