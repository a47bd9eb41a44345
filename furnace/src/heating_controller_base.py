"""
Heating Controller Base Class

Abstract base class for furnace control algorithms.
Provides the common interface a driver (simulation loop, timer tick) uses
to obtain a heating output from a temperature reading.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class HeatingController(ABC):
    """
    Abstract base class for heating controllers.

    Controllers own their target temperature and calculate a heating output
    from the current temperature and the time of the reading. The time is
    always supplied by the caller so that controllers stay deterministic.
    """

    def __init__(self, name: str, target_temperature: float = 20.0):
        """
        Initialize the heating controller.

        Args:
            name: Identifier for this controller instance (e.g., furnace name)
            target_temperature: Initial target temperature in °C
        """
        self.name = name
        self.target_temperature = target_temperature

    @abstractmethod
    def calculate_output(self, current_temp: float, now: datetime) -> float:
        """
        Calculate the heating control output.

        Args:
            current_temp: Current measured temperature in °C
            now: Time of the measurement (real or simulated clock)

        Returns:
            Control output as a percentage (0-100)
            - 0: No heating required
            - 100: Maximum heating required
            - Values in between: Proportional heating
        """
        pass

    @abstractmethod
    def reset(self):
        """
        Reset the controller state.

        Called when:
        - Simulation is restarted
        - Plant is re-initialized

        Should clear any accumulated state (e.g., derivative history).
        """
        pass

    def update_config(self, config: dict):
        """
        Update controller configuration parameters.

        Args:
            config: Dictionary of configuration parameters. The base class
                   understands 'target_temperature'.
        """
        if 'target_temperature' in config:
            self.target_temperature = float(config['target_temperature'])

    def __repr__(self):
        """String representation of the controller."""
        return f"{self.__class__.__name__}(name='{self.name}', target={self.target_temperature})"
