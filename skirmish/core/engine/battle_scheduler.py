"""Round-based battle scheduling.

The BattleScheduler drives the battle state machine:

    ROUND_START -> ACTING -> ROUND_END -> (ROUND_START | BATTLE_OVER)

Each round, both sides get a power-ordered turn queue and take turns
alternately (player first), one combatant per turn, until neither side has an
eligible combatant left. A side whose queue is exhausted simply passes while
the other continues.

When an action kills a combatant that has not acted yet this round, that
combatant's side gets a fresh queue immediately, so dead units are never
asked to act and the remaining order reflects the new state. Kills can
cascade; every one triggers its own rebuild.

A round ends the battle when a side has no living combatants, or when a side
produced no real target during the whole round (stalemate). The latter
guarantees termination when nobody can ever reach anybody.

Everything the scheduler observes is reported through event_emitter; it never
prints and never owns or mutates combatants itself.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence

from ..cancellation import BattleCancelled, CancellationToken
from ..data import BattleOutcome, BattlePhase, IdentitySet, Side
from ..events import (
    BattleEnded,
    BattleEvent,
    QueueRebuilt,
    RoundEnded,
    RoundStarted,
    TurnTaken,
    UnitDefeated,
)
from .turn_queue import TurnQueue, TurnQueueBuilder

if TYPE_CHECKING:
    from ...game.entities.combatant import Combatant


@dataclass
class RoundState:
    """Bookkeeping for a single round, discarded when the round ends."""
    round_number: int
    acted: IdentitySet = field(default_factory=IdentitySet)
    side_progress: dict[Side, bool] = field(
        default_factory=lambda: {side: False for side in Side}
    )
    queues: dict[Side, TurnQueue] = field(default_factory=dict)
    turns_taken: int = 0
    rebuilds: int = 0


@dataclass
class BattleResult:
    """Summary of a concluded battle."""
    outcome: BattleOutcome
    winner: Optional[Side]
    rounds: int
    turns_taken: int
    living_counts: dict[Side, int]


class BattleScheduler:
    """Decides who acts next and when the battle is over."""

    def __init__(
        self,
        event_emitter: Optional[Callable[[BattleEvent], None]] = None,
        cancel_token: Optional[CancellationToken] = None,
        queue_builder: Optional[TurnQueueBuilder] = None,
    ):
        self.emit_event = event_emitter or (lambda e: None)
        self.cancel_token = cancel_token or CancellationToken()
        self.queue_builder = queue_builder or TurnQueueBuilder()

        self.phase = BattlePhase.IDLE
        self.round_state: Optional[RoundState] = None
        self._sides: dict[Side, Any] = {}

    def simulate(self, player_side: Any, computer_side: Any) -> Optional[BattleResult]:
        """Run a battle to completion.

        Args:
            player_side: Army (anything with .units) or sequence of combatants
            computer_side: Army (anything with .units) or sequence of combatants

        Returns:
            The battle summary, or None when either side is missing

        Raises:
            BattleCancelled: if the cancellation token fires mid-battle
        """
        if player_side is None or computer_side is None:
            return None

        self._sides = {Side.PLAYER: player_side, Side.COMPUTER: computer_side}
        self.round_state = None
        round_number = 0
        turns_taken = 0

        try:
            if not all(self.count_alive(side) for side in Side):
                return self._finish(round_number, turns_taken, BattleOutcome.SIDE_ELIMINATED)

            while True:
                round_number += 1
                self._start_round(round_number)
                self._run_round()
                turns_taken += self.round_state.turns_taken

                outcome = self._end_round()
                if outcome is not None:
                    return self._finish(round_number, turns_taken, outcome)
        except BattleCancelled:
            self.round_state = None
            self.phase = BattlePhase.ABORTED
            raise

    # ============== Side queries ==============

    def units_of(self, side: Side) -> Sequence[Optional["Combatant"]]:
        """Combatant list of a side, in army order."""
        army = self._sides.get(side)
        if army is None:
            return []
        units = getattr(army, "units", army)
        return units if units is not None else []

    def count_alive(self, side: Side) -> int:
        return sum(1 for unit in self.units_of(side) if unit is not None and unit.alive)

    def living_counts(self) -> dict[Side, int]:
        return {side: self.count_alive(side) for side in Side}

    def side_of(self, combatant: "Combatant") -> Optional[Side]:
        """Side that lists this exact combatant, or None."""
        for side in Side:
            if any(unit is combatant for unit in self.units_of(side)):
                return side
        return None

    # ============== State machine ==============

    def _start_round(self, round_number: int) -> None:
        self.phase = BattlePhase.ROUND_START
        state = RoundState(round_number=round_number)
        for side in Side:
            state.queues[side] = self.queue_builder.build(self.units_of(side), state.acted, side)
        self.round_state = state
        self.emit_event(RoundStarted(round_number=round_number))

    def _run_round(self) -> None:
        self.phase = BattlePhase.ACTING
        state = self.round_state

        while True:
            anyone_acted = False
            for side in Side:
                self.cancel_token.raise_if_cancelled()
                actor = state.queues[side].pop_next(state.acted)
                if actor is None:
                    continue
                anyone_acted = True
                self._take_turn(side, actor)

            if not anyone_acted:
                break

    def _take_turn(self, side: Side, actor: "Combatant") -> None:
        state = self.round_state
        living_before = IdentitySet(
            unit for s in Side for unit in self.units_of(s) if unit is not None and unit.alive
        )

        target = self._invoke_action(actor)
        if target is actor:
            target = None

        self.emit_event(TurnTaken(
            round_number=state.round_number, side=side, attacker=actor, target=target
        ))
        state.acted.add(actor)
        state.turns_taken += 1

        if target is None:
            return
        state.side_progress[side] = True

        if target in living_before and not target.alive:
            target_side = self.side_of(target)
            had_acted = target in state.acted
            self.emit_event(UnitDefeated(
                round_number=state.round_number, unit=target, side=target_side, had_acted=had_acted
            ))
            if not had_acted and target_side is not None:
                self._rebuild_queue(target_side)

    def _invoke_action(self, actor: "Combatant") -> Optional["Combatant"]:
        program = getattr(actor, "program", None)
        if program is None:
            return None
        return program.attack()

    def _rebuild_queue(self, side: Side) -> None:
        state = self.round_state
        queue = self.queue_builder.build(self.units_of(side), state.acted, side)
        state.queues[side] = queue
        state.rebuilds += 1
        self.emit_event(QueueRebuilt(
            round_number=state.round_number, side=side, queue_size=len(queue)
        ))

    def _end_round(self) -> Optional[BattleOutcome]:
        """Emit the round summary and decide whether the battle continues."""
        self.phase = BattlePhase.ROUND_END
        state = self.round_state
        counts = self.living_counts()
        self.emit_event(RoundEnded(round_number=state.round_number, living_counts=counts))

        if any(count == 0 for count in counts.values()):
            return BattleOutcome.SIDE_ELIMINATED
        if not all(state.side_progress.values()):
            return BattleOutcome.STALEMATE
        return None

    def _finish(self, rounds: int, turns_taken: int, outcome: BattleOutcome) -> BattleResult:
        counts = self.living_counts()
        winner = None
        if outcome is BattleOutcome.SIDE_ELIMINATED:
            survivors = [side for side, count in counts.items() if count > 0]
            if len(survivors) == 1:
                winner = survivors[0]

        self.phase = BattlePhase.BATTLE_OVER
        self.round_state = None
        self.emit_event(BattleEnded(
            round_number=rounds, outcome=outcome, winner=winner, living_counts=counts
        ))
        return BattleResult(
            outcome=outcome,
            winner=winner,
            rounds=rounds,
            turns_taken=turns_taken,
            living_counts=counts,
        )
