from decimal import Decimal, ROUND_HALF_UP

# (lower bound, letter, points), evaluated top-down, first match wins
GRADE_BANDS = (
    (80, "A", 4.0),
    (70, "B", 3.0),
    (60, "C", 2.0),
    (50, "D", 1.0),
    (0, "F", 0.0),
)

GRADE_LETTERS = tuple(letter for _, letter, _ in GRADE_BANDS)


def _band(score: float):
    for lower, letter, points in GRADE_BANDS:
        if score >= lower:
            return letter, points
    return GRADE_BANDS[-1][1], GRADE_BANDS[-1][2]


def grade_letter(score: float) -> str:
    """80+ A, 70+ B, 60+ C, 50+ D, else F"""
    return _band(float(score))[0]


def grade_points(score: float) -> float:
    return _band(float(score))[1]


def round2(value: float) -> float:
    """
    Round to two decimals, halves away from zero (70.665 -> 70.67).
    Only applied to reported averages, never to running sums.
    """
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def performance_level(average: float) -> str:
    """Wording used in the report summary paragraph."""
    if average >= 80:
        return "excellent"
    if average >= 70:
        return "very good"
    if average >= 60:
        return "good"
    if average >= 50:
        return "satisfactory"
    return "needs improvement"
