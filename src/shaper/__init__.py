"""Shaper: authoring core for traffic-shaping strategies."""

__version__ = "0.1.0"
