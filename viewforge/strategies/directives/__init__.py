"""Directive handler implementations."""

from viewforge.strategies.directives.bundle import BundleDirective
from viewforge.strategies.directives.master import MasterPageDirective
from viewforge.strategies.directives.partial import PartialPageDirective
from viewforge.strategies.directives.placeholder import PlaceholderDirective

__all__ = [
    "BundleDirective",
    "MasterPageDirective",
    "PartialPageDirective",
    "PlaceholderDirective",
]
