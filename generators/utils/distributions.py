"""Statistical distribution helpers for realistic telemetry generation."""

import math
import random

import numpy as np


def truncated_normal_ms(mean: float, std: float, min_val: int = 0) -> int:
    """A normal draw rounded to whole milliseconds, floored at ``min_val``."""
    return max(min_val, int(round(np.random.normal(mean, std))))


def positive_normal(mean: float, std: float, min_val: float = 0.01) -> float:
    return max(min_val, float(np.random.normal(mean, std)))


def random_heading() -> tuple[float, float]:
    """Unit vector in a uniformly random direction."""
    angle = random.uniform(0.0, 2 * math.pi)
    return math.cos(angle), math.sin(angle)
