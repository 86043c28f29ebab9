# Application SRS Package
from .scheduler import apply_rating, grade_card

__all__ = ["apply_rating", "grade_card"]
