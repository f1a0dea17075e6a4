"""
Study settings and their JSON persistence.

Settings fill in whatever a quiz's frontmatter leaves unspecified and
control history keeping and adaptive selection. Malformed settings data
falls back to defaults (per field where possible); loading never raises.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from cbt_toolkit.analysis import AdaptiveConfig
from cbt_toolkit.core.models import ExamConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StudySettings:
    """
    User preferences (immutable).

    Attributes:
        save_history: Record attempts in the companion document
        show_history_after_exam: Show the ledger once an exam is submitted
        adaptive_mix_ratio: Share of improvable questions in adaptive sessions, (0, 1]
        default_pass_threshold: Pass mark when the quiz sets none (0-1)
        default_time_limit_minutes: Time limit when the quiz sets none (None = untimed)
        default_shuffle: Shuffle questions when the quiz does not say
        default_show_answer: Allow revealing answers when the quiz does not say
    """

    save_history: bool = True
    show_history_after_exam: bool = True
    adaptive_mix_ratio: float = 0.7
    default_pass_threshold: float = 0.7
    default_time_limit_minutes: Optional[int] = None
    default_shuffle: bool = False
    default_show_answer: bool = False

    def __post_init__(self) -> None:
        """Validate settings on construction."""
        if not 0 < self.adaptive_mix_ratio <= 1:
            raise ValueError(f"adaptive_mix_ratio must be in (0, 1]: {self.adaptive_mix_ratio}")
        if not 0 <= self.default_pass_threshold <= 1:
            raise ValueError(f"default_pass_threshold must be within 0-1: {self.default_pass_threshold}")
        if self.default_time_limit_minutes is not None and self.default_time_limit_minutes < 0:
            raise ValueError(
                f"default_time_limit_minutes must be non-negative: {self.default_time_limit_minutes}"
            )

    def apply_defaults(self, config: ExamConfig) -> ExamConfig:
        """
        Fill the fields a quiz left unset.

        Example:
            >>> StudySettings().apply_defaults(ExamConfig(pass_threshold=0.9)).shuffle_questions
            False
        """
        return replace(
            config,
            time_limit_minutes=(
                config.time_limit_minutes
                if config.time_limit_minutes is not None
                else self.default_time_limit_minutes
            ),
            pass_threshold=(
                config.pass_threshold
                if config.pass_threshold is not None
                else self.default_pass_threshold
            ),
            shuffle_questions=(
                config.shuffle_questions
                if config.shuffle_questions is not None
                else self.default_shuffle
            ),
            show_answer=(
                config.show_answer if config.show_answer is not None else self.default_show_answer
            ),
        )

    def adaptive_config(self, seed: Optional[int] = None) -> AdaptiveConfig:
        return AdaptiveConfig(mix_ratio=self.adaptive_mix_ratio, seed=seed)


class SettingsStore:
    """
    JSON-backed store for StudySettings.

    Any malformed data results in graceful fallback to defaults, never an
    exception: an unreadable file yields StudySettings(), and a field with
    a wrong type or out-of-range value keeps its default.
    """

    CURRENT_VERSION = 1

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load(self) -> StudySettings:
        if not self.path.exists():
            return StudySettings()

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning(f"Settings file {self.path} is corrupted, using defaults: {e}")
            return StudySettings()
        except OSError as e:
            logger.warning(f"Failed to read settings {self.path}, using defaults: {e}")
            return StudySettings()

        if not isinstance(raw, dict):
            logger.warning(f"Settings file {self.path} is not an object, using defaults")
            return StudySettings()

        return self._from_dict(raw)

    def save(self, settings: StudySettings) -> None:
        data: Dict[str, Any] = {"version": self.CURRENT_VERSION, **asdict(settings)}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        logger.debug(f"Saved settings to {self.path}")

    def _from_dict(self, raw: Dict[str, Any]) -> StudySettings:
        settings = StudySettings()
        for spec in fields(StudySettings):
            if spec.name not in raw:
                continue
            value = raw[spec.name]
            if not _has_expected_type(spec.name, value):
                logger.warning(f"Ignoring setting {spec.name}={value!r}: wrong type")
                continue
            try:
                settings = replace(settings, **{spec.name: value})
            except ValueError as e:
                logger.warning(f"Ignoring setting {spec.name}={value!r}: {e}")
        return settings


_BOOL_FIELDS = {"save_history", "show_history_after_exam", "default_shuffle", "default_show_answer"}
_NUMBER_FIELDS = {"adaptive_mix_ratio", "default_pass_threshold"}


def _has_expected_type(name: str, value: Any) -> bool:
    if name in _BOOL_FIELDS:
        return isinstance(value, bool)
    if name in _NUMBER_FIELDS:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if name == "default_time_limit_minutes":
        return value is None or (isinstance(value, int) and not isinstance(value, bool))
    return False
