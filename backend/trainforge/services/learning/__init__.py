"""
Learning services: decisions made after a learner takes a quiz.
"""

from trainforge.services.learning.review_suggestions import needs_review, suggest_review

__all__ = ["needs_review", "suggest_review"]
