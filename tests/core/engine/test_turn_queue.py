"""
Unit tests for the per-side turn queue.

Tests entry ordering, lazy skipping of stale entries and queue building.
"""

from skirmish.core.data import IdentitySet, Side
from skirmish.core.engine import TurnEntry, TurnQueue, TurnQueueBuilder


class TestTurnEntry:
    """Test TurnEntry ordering."""

    def test_higher_power_first(self, make_unit):
        strong = TurnEntry(power=50, sequence_id=2, combatant=make_unit())
        weak = TurnEntry(power=10, sequence_id=1, combatant=make_unit())

        assert strong < weak
        assert not weak < strong

    def test_equal_power_by_sequence(self, make_unit):
        first = TurnEntry(power=10, sequence_id=1, combatant=make_unit())
        second = TurnEntry(power=10, sequence_id=2, combatant=make_unit())

        assert first < second
        assert not second < first


class TestTurnQueue:
    """Test TurnQueue functionality."""

    def test_pops_by_descending_power(self, make_unit):
        queue = TurnQueue(Side.PLAYER)
        units = [make_unit(name=str(p), power=p) for p in (5, 100, 10, 50)]
        for unit in units:
            queue.push(unit)

        acted = IdentitySet()
        order = []
        unit = queue.pop_next(acted)
        while unit is not None:
            order.append(unit.power)
            unit = queue.pop_next(acted)

        assert order == [100, 50, 10, 5]
        assert len(queue) == 0

    def test_ties_keep_insertion_order(self, make_unit):
        queue = TurnQueue()
        first, second, third = (make_unit(name=n, power=7) for n in ("a", "b", "c"))
        for unit in (first, second, third):
            queue.push(unit)

        acted = IdentitySet()
        assert [queue.pop_next(acted) for _ in range(3)] == [first, second, third]

    def test_skips_dead_and_acted(self, make_unit):
        queue = TurnQueue()
        dead = make_unit(name="dead", power=30)
        done = make_unit(name="done", power=20)
        ready = make_unit(name="ready", power=10)
        for unit in (dead, done, ready):
            queue.push(unit)

        dead.alive = False
        acted = IdentitySet([done])

        assert queue.pop_next(acted) is ready
        assert queue.pop_next(acted) is None
        assert len(queue) == 0

    def test_stale_entries_stay_queued_until_reached(self, make_unit):
        """A death after queueing leaves the entry in place for pop_next to skip."""
        queue = TurnQueue()
        victim = make_unit(name="victim", power=9)
        queue.push(victim)
        queue.push(make_unit(name="other", power=1))

        victim.alive = False

        assert len(queue) == 2
        assert queue.pop_next(IdentitySet()).name == "other"


class TestTurnQueueBuilder:
    """Test queue construction."""

    def test_skips_none_dead_and_acted(self, make_unit):
        alive = make_unit(name="alive", power=5)
        dead = make_unit(name="dead", power=9)
        dead.alive = False
        acted_unit = make_unit(name="acted", power=8)

        queue = TurnQueueBuilder().build([None, alive, dead, acted_unit], IdentitySet([acted_unit]), Side.COMPUTER)

        assert len(queue) == 1
        assert queue.side is Side.COMPUTER
        assert queue.pop_next(IdentitySet()) is alive

    def test_none_roster(self):
        queue = TurnQueueBuilder().build(None, IdentitySet())
        assert len(queue) == 0
