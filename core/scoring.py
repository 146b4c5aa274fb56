#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Increment Tracker - Scoring
Effective friction of increments and the load metrics built on it

Version: 1.0.0
Date: 2026-10-19
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Any, Union

from core.models import Arc, ArcStage, EffortLevel, Increment

# ===== CONSTANTS =====

BASE_FRICTION = {
    EffortLevel.LOW: 1,
    EffortLevel.MEDIUM: 2,
    EffortLevel.HIGH: 3,
}

REPEATABLE_MODIFIER = 0.9
UNSUSTAINABLE_MODIFIER = 1.3

# Upper bounds (exclusive) of the daily load bands; anything above is "High"
LOAD_BANDS = (
    (3.0, "Low"),
    (6.0, "Optimal"),
)

STAGE_PRIORITY = {
    ArcStage.MIDDLE.value: 3,
    ArcStage.EARLY.value: 2,
    ArcStage.MATURE.value: 1,
}

# ===== FRICTION =====

def compute_friction(effort: Union[str, EffortLevel], repeat: bool) -> float:
    """
    Effective friction of a single action.

    Base is 1/2/3 for Low/Medium/High, multiplied by 0.9 when the action is
    repeatable and 1.3 when it is not. An unknown effort raises ValueError.
    """
    base = BASE_FRICTION[EffortLevel(effort)]
    modifier = REPEATABLE_MODIFIER if repeat else UNSUSTAINABLE_MODIFIER
    return round(base * modifier, 2)

def friction_band(friction: float) -> str:
    """Colour band used by the week review grid"""
    if friction > 2.5:
        return "high"
    if friction > 1.5:
        return "medium"
    return "low"

# ===== LOAD =====

def daily_load(increments: Iterable[Increment], day: str) -> float:
    """Sum of effective friction of the increments logged on day"""
    load = sum(i.effective_friction for i in increments if i.date == day)
    return round(load, 2)

def load_band(load: float) -> str:
    for upper, name in LOAD_BANDS:
        if load < upper:
            return name
    return "High"

@dataclass
class ArcStats:
    arc_id: str
    count: int
    load: float

    def to_dict(self) -> Dict[str, Any]:
        return {"arc_id": self.arc_id, "count": self.count, "load": self.load}

def arc_stats(increments: Iterable[Increment], arc_id: str) -> ArcStats:
    arc_increments = [i for i in increments if i.arc_id == arc_id]
    total = sum(i.effective_friction for i in arc_increments)
    return ArcStats(arc_id=arc_id, count=len(arc_increments), load=round(total, 1))

def sort_arcs_by_priority(arcs: Iterable[Arc]) -> List[Arc]:
    """Middle arcs first, then Early, then Mature"""
    return sorted(arcs, key=lambda a: STAGE_PRIORITY.get(a.stage, 0), reverse=True)
