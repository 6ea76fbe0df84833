"""Console-friendly formatting of a sample and its verdict."""

from __future__ import annotations

import json
from typing import Dict, Optional, Union

from .diagnostics import Verdict
from .system_state import Sample

NA = "NA"
EXPLAIN_HEADER = "===== VM 健康报告 ====="
EXPLAIN_FOOTER = "======================"
SUMMARY_HEADER = "== VM 快速体检 =="


def format_metric(value: Optional[Union[float, int]]) -> str:
    """Render a percentage the way every output mode shows it, ``NA`` when missing."""
    if value is None:
        return NA
    if isinstance(value, int):
        return str(value)
    return f"{value:.1f}"


def render_summary(sample: Sample, verdict: Verdict) -> str:
    cpu, mem, disk = _metric_strings(sample)
    return "\n".join(
        [
            SUMMARY_HEADER,
            f"CPU: {cpu}% | MEM: {mem}% | DISK: {disk}% | 结论: {verdict.level}",
        ]
    )


def render_explain(sample: Sample, verdict: Verdict) -> str:
    cpu, mem, disk = _metric_strings(sample)
    lines = [
        EXPLAIN_HEADER,
        f"CPU: {cpu}%",
        f"内存: {mem}%",
        f"磁盘: {disk}%",
        f"结论: {verdict.level}",
        f"原因: {verdict.summary}",
        EXPLAIN_FOOTER,
    ]
    return "\n".join(lines)


def render_json(sample: Sample, verdict: Verdict, os_name: str) -> str:
    cpu, mem, disk = _metric_strings(sample)
    payload: Dict[str, str] = {
        "os": os_name,
        "cpu_usage_percent": cpu,
        "memory_usage_percent": mem,
        "disk_usage_percent": disk,
        "overall": str(verdict.level),
        "reasons": verdict.summary,
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)


def _metric_strings(sample: Sample) -> tuple[str, str, str]:
    return (
        format_metric(sample.cpu_percent),
        format_metric(sample.mem_percent),
        format_metric(sample.disk_percent),
    )
