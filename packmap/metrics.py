from __future__ import annotations

import threading
from collections import defaultdict
from typing import Dict, Tuple


_lock = threading.Lock()
_lookups: Dict[Tuple[str, str], int] = defaultdict(int)
_loads: Dict[str, int] = defaultdict(int)
_compile_count = 0
_compile_seconds = 0.0


def observe_lookup(operation: str, found: bool) -> None:
    key = (operation, "hit" if found else "miss")
    with _lock:
        _lookups[key] += 1


def observe_load(outcome: str) -> None:
    with _lock:
        _loads[outcome] += 1


def observe_compile(duration_s: float) -> None:
    global _compile_count, _compile_seconds
    with _lock:
        _compile_count += 1
        _compile_seconds += max(0.0, float(duration_s))


def lookup_count(operation: str, outcome: str) -> int:
    with _lock:
        return _lookups.get((operation, outcome), 0)


def load_count(outcome: str) -> int:
    with _lock:
        return _loads.get(outcome, 0)


def reset_metrics() -> None:
    """Testing helper to zero every counter."""
    global _compile_count, _compile_seconds
    with _lock:
        _lookups.clear()
        _loads.clear()
        _compile_count = 0
        _compile_seconds = 0.0


def _esc(v: str) -> str:
    return v.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def export_prometheus() -> str:
    lines = []
    with _lock:
        lines.append("# HELP packmap_lookup_total Manifest lookups by operation and outcome")
        lines.append("# TYPE packmap_lookup_total counter")
        for (operation, outcome), val in sorted(_lookups.items()):
            lines.append(
                f'packmap_lookup_total{{operation="{_esc(operation)}",outcome="{_esc(outcome)}"}} {int(val)}'
            )

        lines.append("# HELP packmap_manifest_load_total Manifest file reads by outcome")
        lines.append("# TYPE packmap_manifest_load_total counter")
        for outcome, val in sorted(_loads.items()):
            lines.append(f'packmap_manifest_load_total{{outcome="{_esc(outcome)}"}} {int(val)}')

        lines.append("# HELP packmap_compile_seconds On-demand compile duration")
        lines.append("# TYPE packmap_compile_seconds summary")
        lines.append(f"packmap_compile_seconds_sum {float(_compile_seconds)}")
        lines.append(f"packmap_compile_seconds_count {int(_compile_count)}")
    return "\n".join(lines) + "\n"
