"""Engine layer: the per-frame world loop."""

from shadow_ai.engine.world_loop import WorldLoop

__all__ = ["WorldLoop"]
