"""Service-level configuration defaults shared across modules."""

# Incremental delivery of filtered card lists
INITIAL_WINDOW_SIZE = 30
BASE_BATCH_SIZE = 15
MIN_BATCH_SIZE = 5
MAX_BATCH_SIZE = 30
BATCH_SIZE_INCREMENT = 5  # fast scrolling grows the batch quickly
BATCH_SIZE_DECREMENT = 1  # slow scrolling shrinks it gently
VELOCITY_THRESHOLD = 0.05
SIGNAL_COOLDOWN_SECONDS = 0.1
SUB_BATCH_SIZE = 3
PREFETCH_FAN_OUT = 5

# Bounds accepted from the settings file
WINDOW_SIZE_LIMITS = (1, 500)
BATCH_SIZE_LIMITS = (1, 200)
FAN_OUT_LIMITS = (1, 32)
COOLDOWN_LIMITS = (0.0, 5.0)

# Default bounds of the form search range sliders; a range only filters when it narrows these
HP_RANGE = (30, 200)
MAX_DAMAGE_RANGE = (0, 200)
MAX_ENERGY_COST_RANGE = (0, 5)
RETREAT_COST_RANGE = (0, 4)

__all__ = [
    "INITIAL_WINDOW_SIZE",
    "BASE_BATCH_SIZE",
    "MIN_BATCH_SIZE",
    "MAX_BATCH_SIZE",
    "BATCH_SIZE_INCREMENT",
    "BATCH_SIZE_DECREMENT",
    "VELOCITY_THRESHOLD",
    "SIGNAL_COOLDOWN_SECONDS",
    "SUB_BATCH_SIZE",
    "PREFETCH_FAN_OUT",
    "WINDOW_SIZE_LIMITS",
    "BATCH_SIZE_LIMITS",
    "FAN_OUT_LIMITS",
    "COOLDOWN_LIMITS",
    "HP_RANGE",
    "MAX_DAMAGE_RANGE",
    "MAX_ENERGY_COST_RANGE",
    "RETREAT_COST_RANGE",
]
