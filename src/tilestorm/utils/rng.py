from __future__ import annotations

import random

from esper import World


def world_rng(world: World) -> random.Random:
    """Return the random source attached to the world, attaching a fresh one if absent."""
    candidate = getattr(world, "random", None)
    if isinstance(candidate, random.Random):
        return candidate
    rng = random.Random()
    setattr(world, "random", rng)
    return rng
