"""Greedy army preset generator.

Builds an army under a points budget by repeatedly taking the most
cost-effective unit template that still fits:

1. highest attack per point,
2. then highest health per point,
3. then raw attack, raw health, lower cost, type name and input order.

Ratios are compared by cross-multiplication so equal ratios tie exactly.
Each unit type is capped at max_per_type units. Generated units are placed
on distinct cells of a columns x rows block, randomly first and by a
deterministic scan when random probing fails.
"""

import random
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Callable, Optional, Sequence

import numpy as np

from ...core.config_loader import PresetSettings, UnitTemplate
from ...core.data import Cell, Side
from ...core.events import ArmyGenerated, BattleEvent
from ..entities.army import Army
from ..entities.combatant import Combatant


@dataclass(frozen=True)
class _Candidate:
    template: UnitTemplate
    entry_id: int


def _compare_candidates(a: _Candidate, b: _Candidate) -> int:
    ta, tb = a.template, b.template

    left, right = ta.base_attack * tb.cost, tb.base_attack * ta.cost
    if left != right:
        return -1 if left > right else 1

    left, right = ta.health * tb.cost, tb.health * ta.cost
    if left != right:
        return -1 if left > right else 1

    if ta.base_attack != tb.base_attack:
        return -1 if ta.base_attack > tb.base_attack else 1
    if ta.health != tb.health:
        return -1 if ta.health > tb.health else 1
    if ta.cost != tb.cost:
        return -1 if ta.cost < tb.cost else 1
    if ta.unit_type != tb.unit_type:
        return -1 if ta.unit_type < tb.unit_type else 1
    return -1 if a.entry_id < b.entry_id else (1 if a.entry_id > b.entry_id else 0)


class PresetGenerator:
    """Generates a computer-style army from unit templates."""

    def __init__(
        self,
        settings: Optional[PresetSettings] = None,
        rng: Optional[random.Random] = None,
        event_emitter: Optional[Callable[[BattleEvent], None]] = None,
    ):
        self.settings = settings or PresetSettings()
        if rng is None:
            rng = random.Random(self.settings.seed)
        self.rng = rng
        self.emit_event = event_emitter or (lambda e: None)

    def generate(
        self,
        templates: Optional[Sequence[Optional[UnitTemplate]]],
        max_points: int,
        side: Optional[Side] = None,
        column_offset: int = 0,
    ) -> Army:
        """Build an army whose total cost does not exceed max_points.

        Args:
            templates: One or more templates per unit type
            max_points: Points budget
            side: Side the army is generated for, reported in ArmyGenerated
            column_offset: x coordinate of the first placement column

        Returns:
            The generated army; empty with zero points when nothing fits
        """
        army = Army()
        candidates = self._rank_candidates(templates, max_points)

        capacity = self.settings.columns * self.settings.rows
        occupied = np.zeros((self.settings.rows, self.settings.columns), dtype=np.bool_)
        count_by_type: dict[str, int] = {}
        first_row: Optional[int] = None
        used_points = 0

        while candidates and used_points < max_points and len(army) < capacity:
            remaining = max_points - used_points
            candidates = [
                c for c in candidates
                if c.template.cost <= remaining
                and count_by_type.get(c.template.unit_type, 0) < self.settings.max_per_type
            ]
            if not candidates:
                break

            best = candidates[0].template
            slot = self._find_free_slot(occupied, first_row)
            if slot is None:
                break
            column, row = slot
            if first_row is None:
                first_row = row

            number = count_by_type.get(best.unit_type, 0) + 1
            count_by_type[best.unit_type] = number
            army.add(Combatant.from_template(
                best, f"{best.unit_type} {number}", Cell(column_offset + column, row)
            ))
            used_points += best.cost

        army.points = used_points
        self.emit_event(ArmyGenerated(side=side, units_added=len(army), points_used=used_points))
        return army

    def _rank_candidates(
        self, templates: Optional[Sequence[Optional[UnitTemplate]]], max_points: int
    ) -> list[_Candidate]:
        if not templates or max_points <= 0:
            return []

        candidates = [
            _Candidate(template, entry_id)
            for entry_id, template in enumerate(templates)
            if template is not None and 0 < template.cost <= max_points
        ]
        candidates.sort(key=cmp_to_key(_compare_candidates))
        return candidates

    def _find_free_slot(self, occupied: np.ndarray, first_row: Optional[int]) -> Optional[tuple[int, int]]:
        """Claim a free (column, row) in the placement block."""
        rows, columns = occupied.shape

        for attempt in range(self.settings.placement_attempts):
            row = self.rng.randrange(rows)
            column = self.rng.randrange(columns)
            # Spread the first few units away from the first unit's row.
            if first_row is not None and attempt < self.settings.spread_attempts and row == first_row:
                continue
            if not occupied[row, column]:
                occupied[row, column] = True
                return column, row

        scan_orders = []
        if first_row is not None:
            scan_orders.append([r for r in range(rows) if r != first_row])
        scan_orders.append(range(rows))

        for row_order in scan_orders:
            for row in row_order:
                for column in range(columns):
                    if not occupied[row, column]:
                        occupied[row, column] = True
                        return column, row
        return None
