"""Shared data models for feed_sieve."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class FilterResult:
    """Outcome of filtering one feed document."""

    input_path: str
    output_path: Optional[str]
    category: str
    total_entries: int
    kept_entries: int
    kept_titles: List[str] = field(default_factory=list)
