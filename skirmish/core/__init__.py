"""Engine-agnostic core of the battle simulator."""
