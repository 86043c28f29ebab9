# Domain SRS Package
from .models import Rating, ReviewState

__all__ = ["Rating", "ReviewState"]
