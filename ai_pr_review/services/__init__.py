from .review import ReviewOutcome, ReviewService

__all__ = ["ReviewOutcome", "ReviewService"]
