"""
Grading constants for the Riven Grader.

Centralizes the numbers the range, quality and grade calculations share.
"""

# =============================================================================
# Roll Parameters
# =============================================================================

# Riven rank bounds (unranked .. fully ranked)
MIN_RANK = 0
MAX_RANK = 8

# Each rank adds 12.5% of the rank-0 magnitude (rank 8 doubles it)
RANK_SCALE_STEP = 0.125

# Total stat slots a roll may carry (buffs + curses)
MIN_TOTAL_STATS = 2
MAX_TOTAL_STATS = 4

# A roll always has at least one buff
MIN_BUFFS = 1

# Defaults used by the stat range listing (same as the in-game calculator)
DEFAULT_RANK = 8
DEFAULT_BUFFS = 3
DEFAULT_CURSES = 1


# =============================================================================
# Range Derivation
# =============================================================================

# Normalized magnitude extremes queried from the valuation oracle
MAGNITUDE_MIN = 0.0
MAGNITUDE_MAX = 1.0

# Filler tag for the synthetic slots that are not being measured
PLACEHOLDER_TAG = "WeaponCritChanceMod"


# =============================================================================
# Quality / Grade Scale
# =============================================================================

# Quality of an exactly centered roll (also used for zero-width ranges)
CENTER_QUALITY = 0.5

# Maps the [0, 1] quality domain onto a +/-15 percentage point deviation
PERCENT_DIFF_SCALE = 30.0

# Deviations beyond this are outside the grading window ("???")
INDETERMINATE_THRESHOLD = 11.5

# Lower bound of each grade band, best first:
# (threshold, positive-side grade, negative-side grade)
GRADE_THRESHOLDS = (
    (9.5, "S", "F"),
    (7.5, "A+", "C-"),
    (5.5, "A", "C"),
    (3.5, "A-", "C+"),
    (1.5, "B+", "B-"),
)

# Grade of a roll within +/-1.5 of center
CENTER_GRADE = "B"


# =============================================================================
# Files
# =============================================================================

APP_DIR_NAME = ".riven_grader"
CONFIG_FILE_NAME = "config.json"
LOG_FILE_NAME = "riven_grader.log"
CATALOG_FILE_NAME = "stat_catalog.json"
