"""Degree statistics over a dependency edge list."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from .models import Dependency

DEFAULT_TOP_N = 5


@dataclass(frozen=True)
class DependencyStats:
    total_flags_involved: int
    total_edges: int
    in_degree: Dict[str, int] = field(default_factory=dict)   # times referenced
    out_degree: Dict[str, int] = field(default_factory=dict)  # references made
    top_in_degree: List[Tuple[str, int]] = field(default_factory=list)
    top_out_degree: List[Tuple[str, int]] = field(default_factory=list)


def _top(degrees: Dict[str, int], top_n: int) -> List[Tuple[str, int]]:
    # sorted() is stable, so equal counts keep first-seen order
    return sorted(degrees.items(), key=lambda item: item[1], reverse=True)[:top_n]


def compute_stats(edges: Sequence[Dependency], top_n: int = DEFAULT_TOP_N) -> DependencyStats:
    """Count in/out degree per flag and rank the busiest ones."""
    in_degree = Counter()
    out_degree = Counter()
    involved = set()

    for edge in edges:
        out_degree[edge.dependent] += 1
        in_degree[edge.dependency] += 1
        involved.add(edge.dependent)
        involved.add(edge.dependency)

    return DependencyStats(
        total_flags_involved=len(involved),
        total_edges=len(edges),
        in_degree=dict(in_degree),
        out_degree=dict(out_degree),
        top_in_degree=_top(dict(in_degree), top_n),
        top_out_degree=_top(dict(out_degree), top_n),
    )
