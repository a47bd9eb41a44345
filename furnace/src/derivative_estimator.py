"""
Derivative Estimator

Estimates the rate of change of the temperature error from consecutive
samples taken at irregular intervals.
"""

import logging
from datetime import datetime
from typing import Optional


class DerivativeEstimator:
    """
    Rate of change of the error in °C per minute.

    Two states: no previous sample (first call, or after reset) and has a
    previous sample. The first call always reports a rate of 0.
    """

    def __init__(self):
        self.previous_error = 0.0
        self.previous_timestamp: Optional[datetime] = None

    @property
    def has_previous_sample(self) -> bool:
        return self.previous_timestamp is not None

    def update(self, error: float, now: datetime) -> float:
        """
        Estimate the rate for this sample and store it as the new history.

        Args:
            error: Current error in °C
            now: Time of the current sample

        Returns:
            float: Rate in °C/min (0 on the first sample or when the clock
                   did not advance)
        """
        rate = 0.0

        if self.previous_timestamp is not None:
            delta_minutes = (now - self.previous_timestamp).total_seconds() / 60.0
            if delta_minutes > 0:
                rate = (error - self.previous_error) / delta_minutes
            else:
                logging.debug(
                    f"Derivative: clock did not advance (Δt={delta_minutes:.4f} min), rate forced to 0"
                )

        self.previous_error = error
        self.previous_timestamp = now

        return rate

    def reset(self):
        """Forget the previous sample."""
        self.previous_error = 0.0
        self.previous_timestamp = None
