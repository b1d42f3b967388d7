"""Circular dependency detection over the import graph.

Depth-first search tracks two explicit sets: ``visited`` (ever entered)
and ``on_stack`` (on the current DFS path). Reaching a neighbor that is on
the stack closes a cycle, which is the suffix of the current path starting
at that neighbor. Reaching a neighbor that is only visited is a cross or
forward edge and never a cycle.

The traversal uses an explicit stack of successor iterators instead of
recursion so import chains deeper than the interpreter's recursion limit
are handled.
"""

from collections.abc import Hashable, Iterable

import networkx as nx

from wheelscan.models.scan import StructuralFinding

# Cycles with more members than this are critical
CYCLE_CRITICAL_LENGTH = 3

_DONE = object()


def cycle_key(cycle: Iterable[Hashable]) -> str:
    """Canonical key: member names sorted and joined.

    Rotations and different traversal orders of the same member set share
    a key.
    """
    return "|".join(sorted(str(node) for node in cycle))


def find_import_cycles(
    graph: nx.DiGraph,
    order: Iterable[Hashable] | None = None,
) -> list[list[Hashable]]:
    """Find circular dependencies with an on-stack/visited DFS.

    Args:
        graph: Directed import graph.
        order: Root visiting order; defaults to the graph's node order.
            Nodes not in the graph are ignored.

    Returns:
        Cycles in discovery order, each a list of nodes where every node
        imports the next and the last imports the first. Cycles with the
        same member set are reported once.
    """
    visited: set[Hashable] = set()
    on_stack: set[Hashable] = set()
    path: list[Hashable] = []
    position: dict[Hashable, int] = {}
    seen: set[str] = set()
    cycles: list[list[Hashable]] = []

    roots = graph.nodes if order is None else order

    for root in roots:
        if root in visited or root not in graph:
            continue

        visited.add(root)
        on_stack.add(root)
        position[root] = len(path)
        path.append(root)
        stack = [iter(graph.successors(root))]

        while stack:
            neighbor = next(stack[-1], _DONE)

            if neighbor is _DONE:
                stack.pop()
                finished = path.pop()
                on_stack.discard(finished)
                del position[finished]
                continue

            if neighbor not in visited:
                visited.add(neighbor)
                on_stack.add(neighbor)
                position[neighbor] = len(path)
                path.append(neighbor)
                stack.append(iter(graph.successors(neighbor)))
            elif neighbor in on_stack:
                cycle = path[position[neighbor]:]
                key = cycle_key(cycle)
                if key not in seen:
                    seen.add(key)
                    cycles.append(list(cycle))

    return cycles


def cycle_severity(cycle: list[Hashable]) -> str:
    """Return "critical" for cycles longer than 3 members, else "warning"."""
    return "critical" if len(cycle) > CYCLE_CRITICAL_LENGTH else "warning"


def cycle_findings(cycles: list[list[str]]) -> list[StructuralFinding]:
    """Turn cycles of repo-relative paths into circular-dependency findings."""
    findings: list[StructuralFinding] = []
    for cycle in cycles:
        chain = " → ".join([*cycle, cycle[0]])
        findings.append(
            StructuralFinding(
                type="circular-dependency",
                domain="code-organization",
                description=f"Circular dependency detected: {chain}",
                paths=list(cycle),
                severity=cycle_severity(cycle),
                metadata={"cycleLength": len(cycle)},
            )
        )
    return findings
