from datetime import datetime

# ==========================================================
# Academic calendar constants
# ==========================================================
CLASS_LEVELS = ("7", "8", "9")      # junior secondary grades
TERMS = ("1", "2", "3")
MIN_YEAR = 2020
MAX_YEAR = 2030
DEFAULT_TERM = "1"


def current_year() -> int:
    return datetime.now().year


def class_name(class_level: str) -> str:
    """'8' -> 'Grade 8'"""
    return f"Grade {class_level}"
