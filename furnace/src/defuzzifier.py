"""
Weighted-average defuzzification of singleton rule outputs.
"""

import logging
from typing import Iterable, Tuple


def defuzzify(rule_outputs: Iterable[Tuple[float, float]], output_limits: tuple = (0.0, 100.0)) -> float:
    """
    Collapse (strength, output) pairs into one crisp value.

    result = sum(strength * output) / sum(strength), clamped to output_limits.
    Returns 0.0 when no rule fires. A NaN result is returned unchanged.

    Args:
        rule_outputs: (strength, output) pair per rule
        output_limits: (min, max) clamp for the result (default: 0-100)

    Returns:
        float: Crisp output
    """
    numerator = 0.0
    denominator = 0.0

    for strength, output in rule_outputs:
        numerator += strength * output
        denominator += strength

    if denominator == 0:
        logging.debug("Defuzzify: total rule strength is zero, output 0")
        return 0.0

    result = numerator / denominator

    # Comparisons keep NaN as-is (min/max would not)
    low, high = output_limits
    if result < low:
        return low
    if result > high:
        return high
    return result
