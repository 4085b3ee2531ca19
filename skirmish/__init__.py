"""Skirmish: turn-based army battle simulation.

Two layers:
- core: grid, path finding, turn ordering, battle scheduling and events
- game: combatants, armies, default action programs and logging
"""

__version__ = "1.0.0"
