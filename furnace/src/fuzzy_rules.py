"""
Fuzzy Rule Table

Mamdani rule base for the furnace controller. Each rule ANDs (min) one error
term with an optional rate term and maps to a crisp (singleton) heating
output in percent.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class FuzzyRule:
    """
    Immutable rule: IF error is X [AND rate is Y] THEN output = N%

    Attributes:
        error_term: Name of the error term in the antecedent
        rate_term: Name of the rate term, or None for an error-only rule
        output: Crisp consequent in percent (0-100)
    """

    error_term: str
    rate_term: Optional[str]
    output: float

    def __post_init__(self):
        if not 0.0 <= self.output <= 100.0:
            raise ValueError(f"Rule output must be within 0-100%, got {self.output}")
        object.__setattr__(self, 'output', float(self.output))

    def strength(self, error_memberships: Dict[str, float], rate_memberships: Dict[str, float]) -> float:
        """
        Firing strength of the rule (min of the antecedent memberships).

        Args:
            error_memberships: {term: degree} for the error variable
            rate_memberships: {term: degree} for the rate variable

        Returns:
            float: Strength in [0, 1]
        """
        error_degree = error_memberships[self.error_term]
        if self.rate_term is None:
            return error_degree
        return min(error_degree, rate_memberships[self.rate_term])

    def __repr__(self):
        antecedent = f"error={self.error_term}"
        if self.rate_term is not None:
            antecedent += f" AND rate={self.rate_term}"
        return f"FuzzyRule(IF {antecedent} THEN {self.output:g}%)"


RULE_TABLE: Tuple[FuzzyRule, ...] = (
    # Too cold -> full heat
    FuzzyRule('positive_big', None, 100),

    # Slightly cold
    FuzzyRule('positive_small', 'negative', 75),  # cooling down
    FuzzyRule('positive_small', 'zero', 60),      # stable
    FuzzyRule('positive_small', 'positive', 40),  # warming up

    # At target
    FuzzyRule('zero', 'negative', 35),
    FuzzyRule('zero', 'zero', 15),                # maintain
    FuzzyRule('zero', 'positive', 0),

    # Slightly hot
    FuzzyRule('negative_small', 'negative', 10),
    FuzzyRule('negative_small', 'zero', 0),
    FuzzyRule('negative_small', 'positive', 0),

    # Too hot -> off
    FuzzyRule('negative_big', None, 0),
)


def evaluate_rules(
    error_memberships: Dict[str, float],
    rate_memberships: Dict[str, float],
    rules: Tuple[FuzzyRule, ...] = RULE_TABLE
) -> List[Tuple[float, float]]:
    """
    Evaluate every rule in table order.

    Zero-output rules are returned like any other: when they fire they pull
    the weighted average towards 0.

    Args:
        error_memberships: {term: degree} for the error variable
        rate_memberships: {term: degree} for the rate variable
        rules: Rule table to evaluate (default: RULE_TABLE)

    Returns:
        list: (strength, output) pair per rule
    """
    rule_outputs = [(rule.strength(error_memberships, rate_memberships), rule.output) for rule in rules]

    for rule, (strength, _) in zip(rules, rule_outputs):
        if strength > 0.0:
            logging.debug(f"  Rule fired: {rule} | strength={strength:.3f}")

    return rule_outputs
