"""Classify a host sample into an overall health level with reasons."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple

from .system_state import Sample

NO_ANOMALY = "无明显异常"


class Level(IntEnum):
    HEALTHY = 0
    WARNING = 1
    CRITICAL = 2

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Thresholds:
    warning: float
    critical: float
    warning_reason: str
    critical_reason: str


CPU_THRESHOLDS = Thresholds(
    warning=85,
    critical=95,
    warning_reason="CPU使用率较高（{value:.1f}%）",
    critical_reason="CPU使用率过高（{value:.1f}%）",
)
MEMORY_THRESHOLDS = Thresholds(
    warning=85,
    critical=95,
    warning_reason="内存占用较高（{value:.1f}%）",
    critical_reason="内存占用过高（{value:.1f}%）",
)
DISK_THRESHOLDS = Thresholds(
    warning=90,
    critical=95,
    warning_reason="磁盘使用率偏高（{value}%）",
    critical_reason="磁盘空间几乎耗尽（{value}% 已用）",
)


@dataclass(frozen=True)
class Verdict:
    level: Level
    reasons: Tuple[str, ...]

    @property
    def summary(self) -> str:
        return " ".join(self.reasons)


def classify(sample: Sample) -> Verdict:
    """Grade a sample against the fixed thresholds.

    Metrics are checked in CPU, memory, disk order and the reasons keep that
    order. A metric that is ``None`` is skipped. The level only ever goes up,
    so a warning found after a critical metric leaves it critical.
    """
    level = Level.HEALTHY
    reasons: List[str] = []

    checks = (
        (sample.cpu_percent, CPU_THRESHOLDS),
        (sample.mem_percent, MEMORY_THRESHOLDS),
        (sample.disk_percent, DISK_THRESHOLDS),
    )
    for value, thresholds in checks:
        graded = _grade(value, thresholds)
        if graded is None:
            continue
        candidate, reason = graded
        level = max(level, candidate)
        reasons.append(reason)

    return Verdict(level=level, reasons=tuple(reasons) or (NO_ANOMALY,))


def _grade(value: Optional[float], thresholds: Thresholds) -> Optional[Tuple[Level, str]]:
    if value is None:
        return None
    if value > thresholds.critical:
        return Level.CRITICAL, thresholds.critical_reason.format(value=value)
    if value > thresholds.warning:
        return Level.WARNING, thresholds.warning_reason.format(value=value)
    return None
