"""
Shared fixtures for the skirmish test suite.

Provides grids, path finders, event recorders and small combatant factories
for testing the scheduler and the game layer.
"""

import os
import random
import sys

import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from skirmish.core.config_loader import PresetSettings, UnitTemplate
from skirmish.core.data import Cell
from skirmish.core.engine import CallbackProgram, GridModel, PathFinder
from skirmish.core.events import EventManager
from skirmish.game.entities import Army, Combatant


@pytest.fixture
def event_manager():
    """Create an event manager for testing."""
    return EventManager()


@pytest.fixture
def grid():
    """Default 27x21 battlefield grid."""
    return GridModel()


@pytest.fixture
def small_grid():
    """Small 5x5 grid for hand-checked paths."""
    return GridModel(width=5, height=5)


@pytest.fixture
def events():
    """List that collects emitted events; pass events.append as an emitter."""
    return []


@pytest.fixture
def path_finder(grid, events):
    """BFS path finder on the default grid reporting into events."""
    return PathFinder(grid, event_emitter=events.append)


@pytest.fixture
def rng():
    """Seeded random generator for reproducible placement."""
    return random.Random(1234)


@pytest.fixture
def preset_settings():
    return PresetSettings()


@pytest.fixture
def make_unit():
    """Factory for combatants with sensible defaults."""
    def _make_unit(name="unit", power=10, health=50, x=0, y=0, unit_type="Swordsman",
                   attack_type="melee", attack_bonuses=None, defence_bonuses=None):
        return Combatant(
            name=name,
            unit_type=unit_type,
            health=health,
            base_attack=power,
            cost=10,
            attack_type=attack_type,
            attack_bonuses=attack_bonuses,
            defence_bonuses=defence_bonuses,
            position=Cell(x, y),
        )
    return _make_unit


@pytest.fixture
def scripted_unit(make_unit):
    """Factory for combatants whose action is a plain callable.

    The callable receives the acting unit and returns its target.
    """
    def _scripted_unit(name, power, action=None, **kwargs):
        unit = make_unit(name=name, power=power, **kwargs)
        if action is not None:
            unit.program = CallbackProgram(lambda: action(unit))
        return unit
    return _scripted_unit


@pytest.fixture
def templates():
    """Two simple unit templates."""
    return [
        UnitTemplate("Archer", health=30, base_attack=8, cost=50, attack_type="ranged"),
        UnitTemplate("Swordsman", health=60, base_attack=10, cost=70, attack_type="melee"),
    ]


@pytest.fixture
def make_army():
    """Wrap combatants in an Army."""
    def _make_army(*units, points=0):
        return Army(units, points=points)
    return _make_army
