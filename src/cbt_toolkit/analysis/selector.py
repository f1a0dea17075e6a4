"""
Module: analysis.selector

Purpose:
    Adaptive re-study selection. Builds a session weighted toward the
    questions the user has not mastered, topped up with a share of
    mastered questions for reinforcement.

Algorithm:
    1. No attempted question in the index → no_history, select nothing
    2. Partition into improvable (not MASTERED, or not in the index) and mastered
    3. Nothing improvable → all_mastered, select nothing
    4. Sort improvable by success rate (unseen counts as 0.5), then by
       oldest last attempt
    5. mastered share = ceil(improvable * (1 - r) / r), capped by
       availability, raised toward the minimum session size if needed
    6. Take the lowest-streak mastered questions (random tie-break)
    7. Shuffle improvable + mastered together

Key Functions:
    - select_adaptive_questions(): Main entry point

Key Classes:
    - AdaptiveConfig: Mix ratio, minimum session size, seed

Used By:
    - controller.StudyController.build_adaptive_exam
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from cbt_toolkit.core.models import (
    NEVER_ATTEMPTED,
    AdaptiveSelection,
    PerformanceIndex,
    Question,
    QuestionPerformance,
)

logger = logging.getLogger(__name__)

DEFAULT_MIX_RATIO = 0.7
MIN_SESSION_QUESTIONS = 5
UNSEEN_SORT_RATE = 0.5


@dataclass(frozen=True)
class AdaptiveConfig:
    """
    Adaptive selection parameters (immutable).

    Attributes:
        mix_ratio: Target share of improvable questions, in (0, 1]
        min_questions: Session size to reach with mastered questions when
            there are too few improvable ones
        seed: Random seed for reproducible shuffling (None = unseeded)

    Example:
        >>> AdaptiveConfig(mix_ratio=0.5, seed=7)
        AdaptiveConfig(mix_ratio=0.5, min_questions=5, seed=7)
    """

    mix_ratio: float = DEFAULT_MIX_RATIO
    min_questions: int = MIN_SESSION_QUESTIONS
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not 0 < self.mix_ratio <= 1:
            raise ValueError(f"mix_ratio must be in (0, 1], got {self.mix_ratio}")
        if self.min_questions < 0:
            raise ValueError(f"min_questions cannot be negative: {self.min_questions}")


def select_adaptive_questions(
    questions: Sequence[Question],
    index: PerformanceIndex,
    config: Optional[AdaptiveConfig] = None,
    rng: Optional[random.Random] = None,
) -> AdaptiveSelection:
    """
    Select an adaptive re-study session.

    Args:
        questions: Complete question set
        index: Performance index for those questions
        config: Selection parameters (defaults to AdaptiveConfig())
        rng: Random source; defaults to ``random.Random(config.seed)``

    Returns:
        AdaptiveSelection

    Invariants:
        - No question appears twice
        - Nothing is selected when no question has attempts
        - At least min(min_questions, len(questions)) questions are selected
          when improvable and mastered questions are both available

    Example:
        >>> selection = select_adaptive_questions(exam.all_questions, index, AdaptiveConfig(seed=1))
        >>> selection.improvable_count, selection.mastered_count
        (7, 3)
    """
    config = config or AdaptiveConfig()
    rng = rng or random.Random(config.seed)

    if not any(perf.total_attempts > 0 for perf in index.values()):
        return AdaptiveSelection(no_history=True)

    improvable: List[Question] = []
    mastered: List[Question] = []
    for question in questions:
        perf = index.get(question.id)
        if perf is None or not perf.is_mastered:
            improvable.append(question)
        else:
            mastered.append(question)

    if not improvable:
        return AdaptiveSelection(mastered_count=len(mastered), all_mastered=True)

    improvable.sort(key=lambda q: _improvable_sort_key(index.get(q.id)))

    mastered_count = _mastered_share(len(improvable), len(mastered), config)

    # Pre-shuffle so the stable sort breaks streak ties randomly
    rng.shuffle(mastered)
    mastered.sort(key=lambda q: index[q.id].streak)
    reinforcement = mastered[:mastered_count]

    combined = improvable + reinforcement
    rng.shuffle(combined)

    logger.debug(
        f"Adaptive selection: {len(improvable)} improvable + "
        f"{len(reinforcement)} mastered (ratio {config.mix_ratio})"
    )
    return AdaptiveSelection(
        questions=tuple(combined),
        improvable_count=len(improvable),
        mastered_count=len(reinforcement),
    )


def _improvable_sort_key(perf: Optional[QuestionPerformance]) -> tuple[float, int]:
    if perf is None:
        return UNSEEN_SORT_RATE, 0
    rate = UNSEEN_SORT_RATE if perf.success_rate == NEVER_ATTEMPTED else perf.success_rate
    return rate, perf.last_attempt_timestamp


def _mastered_share(improvable: int, available: int, config: AdaptiveConfig) -> int:
    ratio = config.mix_ratio
    count = min(math.ceil(improvable * (1 - ratio) / ratio), available)
    if improvable + count < config.min_questions:
        count = min(config.min_questions - improvable, available)
    return count
