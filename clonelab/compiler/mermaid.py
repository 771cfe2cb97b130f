"""Generate a Mermaid flowchart of the clone status graph."""
from __future__ import annotations

import re
from typing import TYPE_CHECKING

from clonelab.engine.transitions import TRANSITIONS
from clonelab.statuses import ALL_STATUSES, READ_ONLY, REVIEW_READY, STUDENT_EDITABLE, Status

if TYPE_CHECKING:
    from collections.abc import Mapping


def _make_id(index: int, name: str) -> str:
    clean = re.sub(r"[^a-zA-Z0-9_]", "_", name)
    clean = re.sub(r"_+", "_", clean).strip("_")
    return f"s{index}_{clean}"


def generate_mermaid(transitions: Mapping[Status, frozenset[Status]] = TRANSITIONS) -> str:
    ids = {status: _make_id(i, status.name) for i, status in enumerate(ALL_STATUSES, 1)}
    nodes: list[str] = []
    edges: list[str] = []

    for status in ALL_STATUSES:
        sid = ids[status]
        label = status.value.replace('"', "'")
        if status in REVIEW_READY:
            # Waiting on staff → parallelogram
            nodes.append(f'    {sid}[/"{label}"/]')
        elif status not in transitions:
            # No way out → double circle
            nodes.append(f'    {sid}(("{label}"))')
        elif status in READ_ONLY:
            # Locked for students → hexagon
            nodes.append(f'    {sid}{{{{"{label}"}}}}')
        elif status in STUDENT_EDITABLE:
            nodes.append(f'    {sid}["{label}"]')
        else:
            nodes.append(f'    {sid}("{label}")')

    # Deterministic edge order follows the enum
    for source in ALL_STATUSES:
        for target in ALL_STATUSES:
            if target in transitions.get(source, ()):
                edges.append(f"    {ids[source]} --> {ids[target]}")

    lines = ["graph TD"]
    lines.extend(nodes)
    lines.extend(edges)
    return "\n".join(lines)
