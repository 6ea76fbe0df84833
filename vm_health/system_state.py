"""Collect the three host metrics used for the health verdict."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import math
import platform
from typing import Callable, Optional, TypeVar

import psutil

logger = logging.getLogger(__name__)

CPU_SAMPLE_INTERVAL = 0.3
ROOT_MOUNT = "/"

T = TypeVar("T")


class Platform(Enum):
    LINUX = "Linux"
    DARWIN = "Darwin"
    UNSUPPORTED = "unsupported"

    @classmethod
    def detect(cls, system_name: Optional[str] = None) -> "Platform":
        name = system_name if system_name is not None else platform.system()
        for member in (cls.LINUX, cls.DARWIN):
            if member.value == name:
                return member
        return cls.UNSUPPORTED


@dataclass(frozen=True)
class Sample:
    cpu_percent: Optional[float]
    mem_percent: Optional[float]
    disk_percent: Optional[int]


class MetricSource:
    """Platform specific way of reading CPU and memory usage.

    Disk usage is read the same way everywhere, so it lives on the base class.
    Subclasses return ``None`` when a metric cannot be determined.
    """

    platform = Platform.UNSUPPORTED

    def cpu_percent(self) -> Optional[float]:
        return None

    def memory_percent(self) -> Optional[float]:
        return None

    def disk_percent(self) -> Optional[int]:
        usage = psutil.disk_usage(ROOT_MOUNT)
        # Same figure as the Use% column of `df -P /`: reserved blocks excluded, rounded up.
        return math.ceil(usage.used * 100 / (usage.used + usage.free))


class LinuxMetricSource(MetricSource):
    platform = Platform.LINUX

    def cpu_percent(self) -> Optional[float]:
        times = psutil.cpu_times_percent(interval=CPU_SAMPLE_INTERVAL)
        return round(100 - times.idle, 1)

    def memory_percent(self) -> Optional[float]:
        memory = psutil.virtual_memory()
        return round(memory.used / memory.total * 100, 1)


class DarwinMetricSource(MetricSource):
    platform = Platform.DARWIN

    def cpu_percent(self) -> Optional[float]:
        times = psutil.cpu_times_percent(interval=CPU_SAMPLE_INTERVAL)
        return round(100 - times.idle, 1)

    def memory_percent(self) -> Optional[float]:
        memory = psutil.virtual_memory()
        if not memory.total:
            return None
        # On macOS `available` is free + inactive + speculative pages.
        used = memory.total - memory.available
        return round(used / memory.total * 100, 1)


_SOURCES = {
    Platform.LINUX: LinuxMetricSource,
    Platform.DARWIN: DarwinMetricSource,
}


def source_for(target: Platform) -> MetricSource:
    """Return the metric source for ``target``; unknown platforms get the NA-only base."""
    factory = _SOURCES.get(target)
    if factory is None:
        logger.info("no CPU/memory collector for this platform, reporting NA")
        return MetricSource()
    return factory()


def gather_sample(source: Optional[MetricSource] = None) -> Sample:
    """Read every metric once. A metric that cannot be read is reported as ``None``."""
    source = source or source_for(Platform.detect())
    return Sample(
        cpu_percent=_read_metric("cpu", source.cpu_percent),
        mem_percent=_read_metric("memory", source.memory_percent),
        disk_percent=_read_metric("disk", source.disk_percent),
    )


def _read_metric(name: str, reader: Callable[[], Optional[T]]) -> Optional[T]:
    try:
        return reader()
    except (OSError, psutil.Error, ValueError, ZeroDivisionError) as exc:
        logger.warning("could not read %s usage: %s", name, exc)
        return None
