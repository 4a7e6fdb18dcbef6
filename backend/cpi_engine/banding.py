"""
Banding - maps a standardized score to one of six ordered labels.

The same bands are used for indicators, sub-dimensions, dimensions and the
composite index. Improved Shelter carries its own, stricter thresholds.
"""

from typing import Dict, Sequence, Tuple

VERY_SOLID = "VERY SOLID"
SOLID = "SOLID"
MODERATELY_SOLID = "MODERATELY SOLID"
MODERATELY_WEAK = "MODERATELY WEAK"
WEAK = "WEAK"
VERY_WEAK = "VERY WEAK"

# Worst to best
LABELS: Tuple[str, ...] = (
    VERY_WEAK,
    WEAK,
    MODERATELY_WEAK,
    MODERATELY_SOLID,
    SOLID,
    VERY_SOLID,
)

# (lower bound inclusive, label), checked from the top
Bands = Sequence[Tuple[float, str]]

DEFAULT_BANDS: Bands = (
    (80.0, VERY_SOLID),
    (70.0, SOLID),
    (60.0, MODERATELY_SOLID),
    (50.0, MODERATELY_WEAK),
    (40.0, WEAK),
)

SHELTER_BANDS: Bands = (
    (90.0, VERY_SOLID),
    (80.0, SOLID),
    (70.0, MODERATELY_SOLID),
    (60.0, MODERATELY_WEAK),
    (50.0, WEAK),
)

BANDINGS: Dict[str, Bands] = {
    "default": DEFAULT_BANDS,
    "shelter": SHELTER_BANDS,
}


def band(score: float, bands: Bands = DEFAULT_BANDS) -> str:
    """Return the label for a score using closed-open bands from the top."""
    for threshold, label in bands:
        if score >= threshold:
            return label
    return VERY_WEAK


def band_for(score: float, banding: str = "default") -> str:
    """Label a score with a named banding ("default" or "shelter")."""
    try:
        bands = BANDINGS[banding]
    except KeyError:
        raise ValueError(f"Unknown banding '{banding}'") from None
    return band(score, bands)


def label_rank(label: str) -> int:
    """Position of a label in the worst-to-best ordering."""
    return LABELS.index(label)
