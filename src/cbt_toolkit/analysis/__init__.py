"""
Module: analysis

Purpose:
    Pure functions turning attempt history into mastery data:
    classification, the performance index, and adaptive selection.
"""

from .classifier import classify_question
from .index import build_performance_index, summarize_performance
from .selector import AdaptiveConfig, select_adaptive_questions

__all__ = [
    "classify_question",
    "build_performance_index",
    "summarize_performance",
    "AdaptiveConfig",
    "select_adaptive_questions",
]
