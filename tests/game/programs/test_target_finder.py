"""
Unit tests for the line-of-sight target filter.
"""

import pytest

from skirmish.core.events import TargetsUnavailable
from skirmish.game.programs import SuitableTargetFinder


@pytest.fixture
def finder(events):
    return SuitableTargetFinder(height=21, event_emitter=events.append)


class TestSuitableTargetFinder:
    """Test target visibility rules."""

    def test_right_army_front_is_first_column(self, finder, make_unit):
        """Target on the right: column 0 is the front."""
        front = make_unit(name="front", x=24, y=5)
        hidden = make_unit(name="hidden", x=25, y=5)
        open_middle = make_unit(name="open middle", x=25, y=6)

        targets = finder.find_targets([[front], [hidden, open_middle], []], is_left_army_target=False)

        assert targets == [front, open_middle]

    def test_left_army_front_is_last_column(self, finder, make_unit):
        """Target on the left: column 2 is the front."""
        front = make_unit(name="front", x=2, y=5)
        hidden = make_unit(name="hidden", x=1, y=5)
        back = make_unit(name="back", x=0, y=5)

        targets = finder.find_targets([[back], [hidden], [front]], is_left_army_target=True)

        assert targets == [front]

    def test_only_immediate_neighbour_blocks(self, finder, make_unit):
        """A front unit does not hide a back unit when the middle row is empty."""
        front = make_unit(name="front", x=24, y=3)
        back = make_unit(name="back", x=26, y=3)

        targets = finder.find_targets([[front], [], [back]], is_left_army_target=False)

        assert targets == [front, back]

    def test_dead_units_neither_visible_nor_blocking(self, finder, make_unit):
        dead_front = make_unit(name="dead front", x=24, y=4)
        dead_front.alive = False
        middle = make_unit(name="middle", x=25, y=4)

        assert finder.find_targets([[dead_front], [middle], []], False) == [middle]

    def test_out_of_range_rows_are_never_visible(self, finder, make_unit):
        front = make_unit(name="front", x=24, y=25)
        middle = make_unit(name="middle", x=25, y=-1)

        assert finder.find_targets([[front], [middle], [None]], False) == [front]

    def test_none_columns_are_empty(self, finder, make_unit):
        front = make_unit(name="front", x=24, y=1)
        assert finder.find_targets([[front], None, None], False) == [front]

    @pytest.mark.parametrize("columns", [None, [], [[], []], [[], [], [], []]])
    def test_malformed_input(self, finder, events, columns):
        assert finder.find_targets(columns, False) == []
        assert len(events) == 1
        assert isinstance(events[0], TargetsUnavailable)

    def test_nothing_visible_is_reported(self, finder, events):
        assert finder.find_targets([[], [], []], True) == []
        assert isinstance(events[0], TargetsUnavailable)
