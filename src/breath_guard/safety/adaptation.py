"""Pure numeric transforms applied to a breath pattern by ``adapt`` decisions.

None of these touch a positive inhale or exhale down to zero, and none
produce negative durations.
"""

from __future__ import annotations

import math

from breath_guard.models import CAPACITY_MAX, BreathPattern

# Holds never shrink below 30 % of their declared length, however low the tolerance.
MIN_HOLD_MULTIPLIER = 0.3
RECOVERY_HOLD_MULTIPLIER = 0.6

HIGH_SENSITIVITY_CAPS = {
    "inhale": 4.0,
    "hold_in": 2.0,
    "exhale": 6.0,
    "hold_out": 1.0,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 → 3).

    Python's ``round`` uses banker's rounding (2.5 → 2).
    """
    return int(math.floor(value + 0.5))


def adapt_pattern_for_low_hold_tolerance(
    pattern: BreathPattern, hold_tolerance: float
) -> BreathPattern:
    """Scale both holds by ``max(0.3, hold_tolerance / 5)``."""
    multiplier = max(MIN_HOLD_MULTIPLIER, hold_tolerance / CAPACITY_MAX)
    return pattern.model_copy(
        update={
            "hold_in": float(max(0, round_half_up(pattern.hold_in * multiplier))),
            "hold_out": float(max(0, round_half_up(pattern.hold_out * multiplier))),
        }
    )


def adapt_pattern_for_high_sensitivity(pattern: BreathPattern) -> BreathPattern:
    """Cap every phase; a phase already under its cap is left alone."""
    return pattern.model_copy(
        update={
            phase: min(getattr(pattern, phase), cap)
            for phase, cap in HIGH_SENSITIVITY_CAPS.items()
        }
    )


def reduce_pattern_intensity(pattern: BreathPattern) -> BreathPattern:
    """Recovery mode: holds × 0.6, floored to whole seconds."""
    return pattern.model_copy(
        update={
            "hold_in": float(math.floor(pattern.hold_in * RECOVERY_HOLD_MULTIPLIER)),
            "hold_out": float(math.floor(pattern.hold_out * RECOVERY_HOLD_MULTIPLIER)),
        }
    )
