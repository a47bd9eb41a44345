"""
Fuzzy Controller for Furnace Heating

Fuzzy-logic feedback controller turning the temperature error and its rate
of change into a heating output percentage. Behaves smoothly around the
target and saturates cleanly when far from it.
"""

import logging
from datetime import datetime
from typing import List, Tuple

from heating_controller_base import HeatingController
from derivative_estimator import DerivativeEstimator
from membership import ERROR_VARIABLE, RATE_VARIABLE
from fuzzy_rules import RULE_TABLE, evaluate_rules
from defuzzifier import defuzzify


class FuzzyFurnaceController(HeatingController):
    """
    Fuzzy controller for furnace temperature regulation.

    Each evaluation runs the classic pipeline:
    - Derivative: rate of change of the error (°C/min) from the previous sample
    - Fuzzification: error into 5 terms, rate into 3 terms
    - Inference: 11 Mamdani rules, strength = min of antecedent memberships
    - Defuzzification: weighted average of the rule outputs (0-100%)

    Not thread-safe: one driver (timer tick, control loop) calls it at a time.
    NaN temperatures are not validated and produce a NaN output.
    """

    def __init__(self, name: str, target_temperature: float = 20.0):
        """
        Initialize fuzzy controller.

        Args:
            name: Identifier for this controller (e.g., furnace name)
            target_temperature: Initial target temperature in °C (default: 20.0)
        """
        super().__init__(name, target_temperature)

        self.rules = RULE_TABLE

        # Internal state
        self.estimator = DerivativeEstimator()
        self.last_error = 0.0
        self.last_rate = 0.0
        self.last_rule_outputs: List[Tuple[float, float]] = []

    def calculate_output(self, current_temp: float, now: datetime) -> float:
        """
        Calculate fuzzy output based on current temperature.

        Args:
            current_temp: Current measured temperature in °C
            now: Time of the measurement

        Returns:
            Heating output as percentage (0-100)
        """
        # Positive error = need heating, negative = too hot
        error = self.target_temperature - current_temp
        rate = self.estimator.update(error, now)

        error_memberships = ERROR_VARIABLE.fuzzify(error)
        rate_memberships = RATE_VARIABLE.fuzzify(rate)

        rule_outputs = evaluate_rules(error_memberships, rate_memberships, self.rules)
        output = defuzzify(rule_outputs)

        logging.debug(
            f"Fuzzy [{self.name}]: target={self.target_temperature:.2f}°C, current={current_temp:.2f}°C, "
            f"error={error:.2f}°C, rate={rate:.3f}°C/min | Output: {output:.3f}%"
        )

        self.last_error = error
        self.last_rate = rate
        self.last_rule_outputs = rule_outputs

        return output

    def evaluate(self, current_temp: float, now: datetime) -> float:
        """Alias of calculate_output()."""
        return self.calculate_output(current_temp, now)

    def reset(self):
        """
        Reset fuzzy controller state.

        Clears the derivative history so the next evaluation behaves like the
        first one (rate 0). Target temperature is kept.
        """
        self.estimator.reset()
        self.last_error = 0.0
        self.last_rate = 0.0
        self.last_rule_outputs = []
        logging.debug(f"Fuzzy [{self.name}]: Controller reset (derivative history cleared)")

    def update_config(self, config: dict):
        """
        Update controller parameters.

        Output is always 0-100%; only the target is configurable.

        Args:
            config: Dictionary with keys:
                - target_temperature: Target in °C
        """
        super().update_config(config)

        logging.info(f"Fuzzy [{self.name}]: Config updated - Target={self.target_temperature}°C")
