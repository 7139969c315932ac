"""arXiv categories offered in the category picker."""

from typing import Final

AVAILABLE_CATEGORIES: Final[list[tuple[str, str]]] = [
    ("cs.AI", "Artificial Intelligence"),
    ("cs.LG", "Machine Learning"),
    ("cs.CV", "Computer Vision"),
    ("cs.CL", "Computation and Language"),
    ("cs.CR", "Cryptography and Security"),
    ("math.CO", "Combinatorics"),
    ("physics.gen-ph", "General Physics"),
    ("q-bio.QM", "Quantitative Methods"),
    ("stat.ML", "Machine Learning (Statistics)"),
]


def category_name(code: str) -> str | None:
    """Return the display name for a category code, or None if not offered."""
    return next((name for c, name in AVAILABLE_CATEGORIES if c == code), None)


def is_available_category(code: str) -> bool:
    """Check whether a category code is one the picker offers."""
    return category_name(code) is not None
