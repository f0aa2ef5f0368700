"""Timers and counters for verification batches."""

import threading
import time
from collections import defaultdict
from typing import Any, Dict, List


def _stats(samples: List[float]) -> Dict[str, float]:
    return {
        "count": len(samples),
        "sum": sum(samples),
        "avg": sum(samples) / len(samples),
        "min": min(samples),
        "max": max(samples),
    }


class MetricsCollector:
    """
    Records how long batches and items take and how verdicts add up.
    Implements IMetricsCollector protocol.

    Every stopped timer ``name`` appends one sample to ``{name}_duration``.
    Counters are plain integers keyed by name (``passed``, ``timed_out``, ...).
    The clock is monotonic.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._created = time.monotonic()
        self._running: Dict[str, float] = {}
        self._samples: Dict[str, List[float]] = defaultdict(list)
        self._counters: Dict[str, int] = defaultdict(int)

    def start_timer(self, name: str) -> None:
        with self._lock:
            self._running[name] = time.monotonic()

    def stop_timer(self, name: str) -> float:
        """
        Stop ``name`` and record the sample.

        Raises:
            KeyError: If the timer is not running
        """
        now = time.monotonic()
        with self._lock:
            started = self._running.pop(name, None)
            if started is None:
                raise KeyError(f"Timer '{name}' was not started")
            elapsed = now - started
            self._samples[f"{name}_duration"].append(elapsed)
        return elapsed

    def record_metric(self, name: str, value: float) -> None:
        with self._lock:
            self._samples[name].append(float(value))

    def increment_counter(self, name: str, amount: int = 1) -> None:
        with self._lock:
            self._counters[name] += amount

    def get_counter(self, name: str) -> int:
        with self._lock:
            return self._counters.get(name, 0)

    def get_metric(self, name: str) -> List[float]:
        with self._lock:
            return list(self._samples.get(name, []))

    def get_summary(self) -> Dict[str, Any]:
        """Counters plus count/sum/avg/min/max per recorded metric."""
        with self._lock:
            counters = dict(self._counters)
            metrics = {name: _stats(values) for name, values in self._samples.items() if values}

        return {
            "total_elapsed": self.elapsed_time(),
            "counters": counters,
            "metrics": metrics,
        }

    def elapsed_time(self) -> float:
        """Seconds since creation or the last reset."""
        return time.monotonic() - self._created

    def reset(self) -> None:
        with self._lock:
            self._created = time.monotonic()
            self._running.clear()
            self._samples.clear()
            self._counters.clear()

    def format_summary(self) -> str:
        summary = self.get_summary()
        lines = [f"Total elapsed: {summary['total_elapsed']:.2f}s"]

        if summary['counters']:
            lines.append("Counters:")
            lines.extend(f"  {name}: {value}" for name, value in sorted(summary['counters'].items()))

        if summary['metrics']:
            lines.append("Timers:")
            for name, data in sorted(summary['metrics'].items()):
                lines.append(
                    f"  {name}: count={data['count']} avg={data['avg']:.3f} "
                    f"min={data['min']:.3f} max={data['max']:.3f}"
                )

        return "\n".join(lines)
