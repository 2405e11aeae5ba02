"""Command line task time tracker."""

__version__ = "0.1.0"
