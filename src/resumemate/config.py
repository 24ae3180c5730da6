"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


def _check_range(name: str, value: float, low: float, high: float) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-sonnet-4-5-20250929"
    timeout: int = 60
    max_tokens: int = 8000
    enabled: bool = True

    def __post_init__(self) -> None:
        _check_range("timeout", self.timeout, 1, 600)
        _check_range("max_tokens", self.max_tokens, 256, 64000)


@dataclass(frozen=True)
class GatewayConfig:
    failure_window_seconds: float = 120.0
    failure_threshold: int = 5
    open_duration_seconds: float = 600.0
    max_concurrent: int = 3
    max_attempts: int = 2
    timeout_seconds: float = 30.0
    retry_backoff: float = 1.0

    def __post_init__(self) -> None:
        _check_range("failure_threshold", self.failure_threshold, 1, 100)
        _check_range("max_concurrent", self.max_concurrent, 1, 64)
        _check_range("max_attempts", self.max_attempts, 1, 5)
        _check_range("timeout_seconds", self.timeout_seconds, 0.01, 600)
        _check_range("retry_backoff", self.retry_backoff, 0, 30)
        if self.failure_window_seconds <= 0 or self.open_duration_seconds <= 0:
            raise ValueError("failure_window_seconds and open_duration_seconds must be positive")


@dataclass(frozen=True)
class QualityConfig:
    jaccard_threshold: float = 0.85
    ending_word_count: int = 5
    min_paragraphs: int = 3
    max_paragraphs: int = 5
    max_skill_chars: int = 50
    max_skill_words: int = 6
    skill_label_words: int = 3
    max_repair_rounds: int = 4

    def __post_init__(self) -> None:
        _check_range("jaccard_threshold", self.jaccard_threshold, 0.5, 1.0)
        _check_range("max_paragraphs", self.max_paragraphs, 3, 12)
        if self.min_paragraphs > self.max_paragraphs:
            raise ValueError("min_paragraphs cannot exceed max_paragraphs")


@dataclass(frozen=True)
class BoosterConfig:
    min_improvement: int = 15
    score_floor: int = 45
    max_passes: int = 3
    max_injected_skills: int = 8
    max_summary_terms: int = 4
    max_bullets_per_role: int = 6

    def __post_init__(self) -> None:
        _check_range("min_improvement", self.min_improvement, 0, 100)
        _check_range("score_floor", self.score_floor, 0, 100)
        _check_range("max_passes", self.max_passes, 0, 3)


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    gateway: GatewayConfig = field(default_factory=GatewayConfig)
    quality: QualityConfig = field(default_factory=QualityConfig)
    booster: BoosterConfig = field(default_factory=BoosterConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        gateway=GatewayConfig(**raw.get("gateway", {})),
        quality=QualityConfig(**raw.get("quality", {})),
        booster=BoosterConfig(**raw.get("booster", {})),
    )
