"""
Membership Functions for the Furnace Fuzzy Controller

Maps crisp values (temperature error, rate of change) into degrees of
membership of the linguistic terms used by the rule table.

Three shapes are supported:
- shoulder_low:  open to the left, 1 below `minimum` falling to 0 at `peak`
- triangle:      0 -> 1 -> 0 between `left`, `peak` and `right`
- shoulder_high: open to the right, 0 at `peak` rising to 1 at `maximum`

Adjacent terms share breakpoints (a term's foot is its neighbour's peak),
so at any peak exactly one term evaluates to 1.0 and its neighbours to 0.0.
"""

import logging
from typing import Dict, List, Tuple

# Error breakpoints in °C (target - measured)
ERROR_NEGATIVE_BIG_MIN = -2.3
ERROR_NEGATIVE_SMALL_PEAK = -1.2
ERROR_ZERO_PEAK = 0.0
ERROR_POSITIVE_SMALL_PEAK = 1.2
ERROR_POSITIVE_BIG_MAX = 2.3

# Rate breakpoints in °C/min
RATE_NEGATIVE_MAX = -1.0
RATE_ZERO_PEAK = 0.0
RATE_POSITIVE_MAX = 1.0


def triangle(value: float, left: float, peak: float, right: float) -> float:
    """Triangular membership: 0 outside (left, right), 1 at peak."""
    if value <= left or value >= right:
        return 0.0
    if value <= peak:
        return (value - left) / (peak - left)
    return (right - value) / (right - peak)


def shoulder_low(value: float, minimum: float, peak: float) -> float:
    """Open-left shoulder: 1 up to minimum, 0 from peak on."""
    if value <= minimum:
        return 1.0
    if value >= peak:
        return 0.0
    return (peak - value) / (peak - minimum)


def shoulder_high(value: float, peak: float, maximum: float) -> float:
    """Open-right shoulder: 0 up to peak, 1 from maximum on."""
    if value <= peak:
        return 0.0
    if value >= maximum:
        return 1.0
    return (value - peak) / (maximum - peak)


SHAPES = {
    'shoulder_low': shoulder_low,
    'triangle': triangle,
    'shoulder_high': shoulder_high,
}


class FuzzyTerm:
    """A named linguistic term: a shape plus its breakpoints"""

    def __init__(self, name: str, shape: str, breakpoints: Tuple[float, ...]):
        """
        Initialize a term.

        Args:
            name: Term name (e.g., "positive_small")
            shape: One of 'shoulder_low', 'triangle', 'shoulder_high'
            breakpoints: (minimum, peak) for shoulder_low,
                        (left, peak, right) for triangle,
                        (peak, maximum) for shoulder_high
        """
        if shape not in SHAPES:
            raise ValueError(f"Unknown membership shape '{shape}' for term '{name}'")

        expected = 3 if shape == 'triangle' else 2
        if len(breakpoints) != expected:
            raise ValueError(
                f"Term '{name}' ({shape}) needs {expected} breakpoints, got {len(breakpoints)}"
            )
        if list(breakpoints) != sorted(breakpoints):
            raise ValueError(f"Breakpoints for term '{name}' must be ascending: {breakpoints}")

        self.name = name
        self.shape = shape
        self.breakpoints = tuple(breakpoints)
        self._function = SHAPES[shape]

    def degree(self, value: float) -> float:
        """Degree of membership of `value` in this term"""
        return self._function(value, *self.breakpoints)

    def __repr__(self):
        return f"FuzzyTerm({self.name}: {self.shape}{self.breakpoints})"


class LinguisticVariable:
    """A crisp input partitioned into ordered fuzzy terms"""

    def __init__(self, name: str, unit: str, terms: List[FuzzyTerm]):
        self.name = name
        self.unit = unit
        self.terms = terms

    @property
    def term_names(self) -> List[str]:
        return [term.name for term in self.terms]

    def fuzzify(self, value: float) -> Dict[str, float]:
        """
        Compute the membership of `value` in every term.

        Args:
            value: Crisp input in the variable's unit

        Returns:
            dict: {term_name: degree} for all terms, including zero degrees
        """
        memberships = {term.name: term.degree(value) for term in self.terms}

        logging.debug(
            f"Fuzzify {self.name}={value:.3f}{self.unit} → "
            + ", ".join(f"{name}={degree:.3f}" for name, degree in memberships.items())
        )
        return memberships

    def __repr__(self):
        return f"LinguisticVariable({self.name}, terms={self.term_names})"


ERROR_VARIABLE = LinguisticVariable('error', '°C', [
    FuzzyTerm('negative_big', 'shoulder_low', (ERROR_NEGATIVE_BIG_MIN, ERROR_NEGATIVE_SMALL_PEAK)),
    FuzzyTerm('negative_small', 'triangle', (ERROR_NEGATIVE_BIG_MIN, ERROR_NEGATIVE_SMALL_PEAK, ERROR_ZERO_PEAK)),
    FuzzyTerm('zero', 'triangle', (ERROR_NEGATIVE_SMALL_PEAK, ERROR_ZERO_PEAK, ERROR_POSITIVE_SMALL_PEAK)),
    FuzzyTerm('positive_small', 'triangle', (ERROR_ZERO_PEAK, ERROR_POSITIVE_SMALL_PEAK, ERROR_POSITIVE_BIG_MAX)),
    FuzzyTerm('positive_big', 'shoulder_high', (ERROR_POSITIVE_SMALL_PEAK, ERROR_POSITIVE_BIG_MAX)),
])

RATE_VARIABLE = LinguisticVariable('rate', '°C/min', [
    FuzzyTerm('negative', 'shoulder_low', (RATE_NEGATIVE_MAX, RATE_ZERO_PEAK)),
    FuzzyTerm('zero', 'triangle', (RATE_NEGATIVE_MAX, RATE_ZERO_PEAK, RATE_POSITIVE_MAX)),
    FuzzyTerm('positive', 'shoulder_high', (RATE_ZERO_PEAK, RATE_POSITIVE_MAX)),
])
