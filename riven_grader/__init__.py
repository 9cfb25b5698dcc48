"""
Riven Grader.

Derives the value range of each stat on a riven roll from a valuation
oracle, scores observed values within those ranges and classifies them
into letter grades.

Public API:
- RollGrader: grade a whole roll (grade / try_grade / grade_named)
- RangeResolver: per-stat ranges and full stat range listings
- score / classify / aggregate: the individual grading steps
- get_catalog_store(): the process-wide stat catalog

Example:
    from riven_grader import ItemProfile, ObservedStat, RollComposition, RollGrader

    report = RollGrader().grade(
        ItemProfile(category="pistol", disposition=1.1),
        RollComposition(2, 0),
        rank=8,
        observed=[ObservedStat("Multishot", 140.0), ObservedStat("Damage", 210.0)],
    )
"""
from riven_grader.errors import (
    CatalogLoadError,
    InvalidComposition,
    InvalidRollParameters,
    OracleFailure,
    RivenGradingError,
    UnresolvableStat,
)
from riven_grader.grade_classifier import (
    GRADE_TABLE,
    Grade,
    classify,
    classify_quality,
    quality_to_percent_diff,
)
from riven_grader.models import (
    GradedStat,
    ItemProfile,
    ObservedStat,
    OracleSlot,
    RollComposition,
    RollGrade,
    RollReport,
    Slot,
    StatRange,
    StatRangeEntry,
)
from riven_grader.stat_catalog import (
    CatalogSnapshot,
    CatalogStore,
    StatDefinition,
    ValueClass,
    get_catalog_store,
    reset_catalog_store,
)
from riven_grader.oracle import TableValuationOracle
from riven_grader.range_resolver import RangeResolver
from riven_grader.quality_scorer import score, to_internal_value
from riven_grader.roll_aggregator import aggregate
from riven_grader.roll_grader import RollGrader
from riven_grader.result import Err, Ok, Result

__version__ = "1.0.0"

__all__ = [
    # Errors
    "CatalogLoadError",
    "InvalidComposition",
    "InvalidRollParameters",
    "OracleFailure",
    "RivenGradingError",
    "UnresolvableStat",
    # Grades
    "GRADE_TABLE",
    "Grade",
    "classify",
    "classify_quality",
    "quality_to_percent_diff",
    # Models
    "GradedStat",
    "ItemProfile",
    "ObservedStat",
    "OracleSlot",
    "RollComposition",
    "RollGrade",
    "RollReport",
    "Slot",
    "StatRange",
    "StatRangeEntry",
    # Catalog
    "CatalogSnapshot",
    "CatalogStore",
    "StatDefinition",
    "ValueClass",
    "get_catalog_store",
    "reset_catalog_store",
    # Engine
    "TableValuationOracle",
    "RangeResolver",
    "RollGrader",
    "aggregate",
    "score",
    "to_internal_value",
    # Results
    "Err",
    "Ok",
    "Result",
]
