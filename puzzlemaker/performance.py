"""
Stage timing for puzzle generation.

When GeneratorConfig.enable_performance_logging is set, timed stages are
recorded per thread as a tree. The caller that opened the outermost stage
takes the report with take_report(), which also empties the record.
"""

import time
import functools
from typing import List, Dict, Any
from contextlib import contextmanager
import threading


def _logging_enabled() -> bool:
    from puzzlemaker.config import GeneratorConfig

    return GeneratorConfig.enable_performance_logging


class PerformanceTimer:
    """Per-thread tree of stage timings."""

    def __init__(self):
        self._local = threading.local()

    def _state(self) -> threading.local:
        if not hasattr(self._local, 'open_stages'):
            self._local.open_stages = []
            self._local.finished = []
        return self._local

    @property
    def pending(self) -> int:
        """Number of finished top-level stages not yet taken."""
        return len(self._state().finished)

    @contextmanager
    def stage(self, name: str):
        """Record the wall time of the enclosed block under name."""
        if not _logging_enabled():
            yield
            return

        state = self._state()
        node = {'name': name, 'elapsed': 0.0, 'children': []}
        parent = state.open_stages[-1] if state.open_stages else None
        state.open_stages.append(node)
        started = time.perf_counter()

        try:
            yield
        finally:
            node['elapsed'] = time.perf_counter() - started
            state.open_stages.pop()
            (parent['children'] if parent else state.finished).append(node)

    def take_report(self) -> List[str]:
        """
        Format and discard the finished stages of this thread.

        Returns:
            Indented lines, one per stage, with share of the parent stage
        """
        state = self._state()
        finished, state.finished = state.finished, []
        if not finished:
            return []

        total = sum(node['elapsed'] for node in finished)
        lines = []

        def walk(node: Dict[str, Any], depth: int, parent_elapsed: float):
            share = node['elapsed'] / parent_elapsed * 100 if parent_elapsed else 100.0
            lines.append(f"{'  ' * depth}{node['name']}: {node['elapsed']:.3f}s ({share:.1f}%)")
            for child in node['children']:
                walk(child, depth + 1, node['elapsed'])

        for node in finished:
            walk(node, 0, total)

        lines.append(f"TOTAL: {total:.3f}s")
        return lines


_timer = PerformanceTimer()


def timed(func):
    """Record each call of func as a stage named module.function."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if not _logging_enabled():
            return func(*args, **kwargs)

        with _timer.stage(f"{func.__module__}.{func.__name__}"):
            return func(*args, **kwargs)

    return wrapper


@contextmanager
def time_block(name: str):
    """Context manager recording an arbitrary block as a stage."""
    with _timer.stage(name):
        yield


def take_report() -> List[str]:
    """Formatted timings of this thread's finished stages, then cleared."""
    return _timer.take_report()


def print_performance_report(lines: List[str]):
    """Print report lines from take_report() between banner rules."""
    if not lines:
        return

    print("\n" + "=" * 80)
    print("PERFORMANCE TIMING REPORT")
    print("=" * 80)
    for line in lines:
        print(line)
    print("=" * 80 + "\n")
