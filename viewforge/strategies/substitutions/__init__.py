"""Substitution handler implementations."""

from viewforge.strategies.substitutions.antiforgery import AntiForgeryTokenSubstitution
from viewforge.strategies.substitutions.comment import CommentSubstitution
from viewforge.strategies.substitutions.head import HeadSubstitution

__all__ = [
    "AntiForgeryTokenSubstitution",
    "CommentSubstitution",
    "HeadSubstitution",
]
