"""
Single-shot VM health check: CPU, memory and root disk usage graded against fixed thresholds.
"""

__all__ = ["diagnostics", "system_state", "formatting", "cli"]
__version__ = "0.1.0"
