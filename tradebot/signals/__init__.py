"""
Signal generation module.

Turns indicator readings into buy, sell or hold decisions with a
confidence score.
"""

from .confidence import calculate_confidence
from .generator import SignalGenerator

__all__ = ["SignalGenerator", "calculate_confidence"]
