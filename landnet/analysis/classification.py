"""Land-intensity classification: score bands and keyword rules.

Keyword rules are checked in table order (High before Medium before Low), so
"medium-high" resolves to High. The Spanish labels are the ones the
generation prompt historically produced.
"""

from __future__ import annotations

from landnet.models.schemas import LandClassification
from landnet.utils.text_processing import fold_keyword

CLASSIFICATION_RULES: tuple[tuple[LandClassification, tuple[str, ...]], ...] = (
    ("High", ("high", "alta", "alto")),
    ("Medium", ("medium", "media", "medio", "med", "moderat", "moderad")),
    ("Low", ("low", "baja", "bajo")),
)

HIGH_BAND_MIN = 8
MEDIUM_BAND_MIN = 4

DEFAULT_SCORE = 3


def classify_score(score: int | None) -> LandClassification:
    """Score band: >=8 High, 4-7 Medium, <=3 Low. Missing scores count as the default."""
    value = DEFAULT_SCORE if score is None else score
    if value >= HIGH_BAND_MIN:
        return "High"
    if value >= MEDIUM_BAND_MIN:
        return "Medium"
    return "Low"


def classify_text(text: str | None) -> LandClassification | None:
    """First rule whose keyword appears in the text, or ``None``."""
    if not text:
        return None
    folded = fold_keyword(text)
    for category, keywords in CLASSIFICATION_RULES:
        if any(keyword in folded for keyword in keywords):
            return category
    return None


def normalize_classification(text: str | None, score: int | None) -> LandClassification:
    """Consistent category for a node.

    The score is authoritative when present; the text only decides when there
    is no score.
    """
    if score is not None:
        return classify_score(score)
    from_text = classify_text(text)
    if from_text is not None:
        return from_text
    return classify_score(None)
