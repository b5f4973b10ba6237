"""Concrete strategy implementations."""

from viewforge.strategies.directives import (
    BundleDirective,
    MasterPageDirective,
    PartialPageDirective,
    PlaceholderDirective,
)
from viewforge.strategies.substitutions import (
    AntiForgeryTokenSubstitution,
    CommentSubstitution,
    HeadSubstitution,
)

__all__ = [
    "BundleDirective",
    "MasterPageDirective",
    "PartialPageDirective",
    "PlaceholderDirective",
    "AntiForgeryTokenSubstitution",
    "CommentSubstitution",
    "HeadSubstitution",
]
