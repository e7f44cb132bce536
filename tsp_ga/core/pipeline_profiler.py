"""
Stage timing for the evolution loop.
Records how long selection, mutation, crossover and evaluation take per generation.
"""

from __future__ import annotations

import threading
import time
from collections import defaultdict
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional


class PipelineProfiler:
    """Collects timing information for named stages."""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: Dict[str, List[float]] = defaultdict(list)
        self.enabled = True

    def reset(self):
        with self._lock:
            self._records = defaultdict(list)

    @contextmanager
    def profile(self, stage: str) -> Iterator[None]:
        """Time the enclosed block under ``stage``."""
        if not self.enabled:
            yield
            return
        start = time.perf_counter()
        try:
            yield
        finally:
            self.record(stage, time.perf_counter() - start)

    def record(self, stage: str, duration: float):
        with self._lock:
            self._records[stage].append(duration)

    def get_summary(self) -> List[Dict[str, Any]]:
        """Return aggregated stats per stage sorted by total time desc."""
        summary = []
        with self._lock:
            for stage, durations in self._records.items():
                total = sum(durations)
                count = len(durations)
                summary.append({
                    'stage': stage,
                    'count': count,
                    'total_seconds': total,
                    'avg_seconds': total / count if count else 0.0,
                    'max_seconds': max(durations) if durations else 0.0,
                })
        summary.sort(key=lambda item: item['total_seconds'], reverse=True)
        return summary

    def format_summary(self, top_n: Optional[int] = None) -> str:
        summary = self.get_summary()
        if top_n is not None:
            summary = summary[:top_n]
        lines = ["=== Evolution Profiling Summary ==="]
        for item in summary:
            lines.append(
                f"{item['stage']:<24s} count={item['count']:>5} "
                f"total={item['total_seconds']:.4f}s "
                f"avg={item['avg_seconds']:.6f}s "
                f"max={item['max_seconds']:.6f}s"
            )
        return "\n".join(lines)


pipeline_profiler = PipelineProfiler()
