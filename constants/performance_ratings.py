STRING_RATING_MAP = {
    "Kurang Baik": 65,
    "Baik": 75,
    "Sangat Baik": 85,
}

NUMERIC_RATING_THRESHOLDS = {
    "EXCELLENT": 85,
    "GOOD": 75,
    "FAIR": 65,
    "POOR": 50,
}

MIN_SCORE = 0
MAX_SCORE = 100

# Legacy form exports used 10 for "Kurang Baik" and anything above 75 for "Sangat Baik"
LEGACY_FAIR_SCORE = 10


def get_rating_label(score: float) -> str:
    """Return the descriptive Indonesian label for a numeric score."""
    if score >= NUMERIC_RATING_THRESHOLDS["EXCELLENT"]:
        return "Sangat Baik"
    if score >= NUMERIC_RATING_THRESHOLDS["GOOD"]:
        return "Baik"
    if score >= NUMERIC_RATING_THRESHOLDS["FAIR"]:
        return "Cukup"
    return "Kurang Baik"
