"""Engine pieces of a classic 3D pinball table: geometry, rendering, scores, options and music conversion."""

__version__ = "0.1.0"