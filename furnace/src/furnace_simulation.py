#!/usr/bin/env python3
"""
Furnace Simulation - Headless driver for the furnace controller

Features:
- First-order thermal plant (furnace heating vs. loss to outside)
- Simulated clock injected into the controller on every tick
- Bounded temperature/output history for charting front-ends
- YAML configuration and .env overrides
"""

import os
import sys
import logging
from collections import deque
from datetime import datetime, timedelta

from dotenv import load_dotenv

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from heating_controller_base import HeatingController
from fuzzy_controller import FuzzyFurnaceController
from furnace_config import read_config

AT_TARGET_BAND = 0.5  # °C


class ThermalPlant:
    """
    Room heated by a furnace and losing heat to the outside.

    Per simulated minute:
    - heating = output% * max_heating_rate
    - cooling = (inside - outside) * heat_loss_rate / 10
    """

    def __init__(self, current_temperature: float = 18.0, outside_temperature: float = 5.0,
                 heat_loss_rate: float = 0.5, max_heating_rate: float = 3.0):
        self.current_temperature = current_temperature
        self.outside_temperature = outside_temperature
        self.heat_loss_rate = heat_loss_rate
        self.max_heating_rate = max_heating_rate

    def step(self, output: float, dt_seconds: float = 1.0) -> float:
        """
        Advance the plant by dt_seconds with the furnace at `output` percent.

        Returns:
            float: New inside temperature in °C
        """
        heating = (output / 100.0) * self.max_heating_rate / 60.0 * dt_seconds
        cooling = (self.current_temperature - self.outside_temperature) * (self.heat_loss_rate / 60.0) / 10.0 * dt_seconds

        self.current_temperature += heating - cooling
        return self.current_temperature

    def __repr__(self):
        return (f"ThermalPlant(inside={self.current_temperature:.2f}°C, "
                f"outside={self.outside_temperature:.2f}°C)")


class FurnaceSimulation:
    """
    Drives a controller against a thermal plant on a simulated clock.
    """

    def __init__(self, controller: HeatingController, plant: ThermalPlant, tick_seconds: float = 1.0,
                 history_length: int = 200, start_time: datetime = None):
        if tick_seconds <= 0:
            raise ValueError(f"tick_seconds must be positive, got {tick_seconds}")

        self.controller = controller
        self.plant = plant
        self.tick_seconds = tick_seconds
        self.start_time = start_time or datetime(2000, 1, 1)
        self.elapsed_seconds = 0.0

        self.temperature_history = deque(maxlen=history_length)
        self.output_history = deque(maxlen=history_length)

    @property
    def now(self) -> datetime:
        """Current simulated time"""
        return self.start_time + timedelta(seconds=self.elapsed_seconds)

    def tick(self) -> float:
        """
        Run one control step.

        Returns:
            float: Controller output applied during this step (0-100%)
        """
        output = self.controller.calculate_output(self.plant.current_temperature, self.now)
        temperature = self.plant.step(output, self.tick_seconds)

        self.temperature_history.append(temperature)
        self.output_history.append(output)
        self.elapsed_seconds += self.tick_seconds

        return output

    def run(self, steps: int) -> list:
        """Run `steps` control steps and return their outputs"""
        return [self.tick() for _ in range(steps)]

    def reset(self):
        """
        Restart the simulation.

        The room starts slightly above the outside temperature and the
        controller forgets its derivative history.
        """
        self.plant.current_temperature = self.plant.outside_temperature + 5
        self.elapsed_seconds = 0.0
        self.temperature_history.clear()
        self.output_history.clear()
        self.controller.reset()
        logging.info(f"Simulation reset | {self.plant}")

    def elapsed_label(self) -> str:
        """Simulated time as MM:SS"""
        total = int(self.elapsed_seconds)
        minutes, seconds = divmod(total, 60)
        return f"{minutes:02d}:{seconds:02d}"

    def temperature_status(self) -> str:
        """'at_target', 'below_target' or 'above_target'"""
        error = self.controller.target_temperature - self.plant.current_temperature
        if abs(error) < AT_TARGET_BAND:
            return 'at_target'
        if error > 0:
            return 'below_target'
        return 'above_target'


def create_controller(name: str, config: dict) -> HeatingController:
    """
    Build a controller from its config section.

    Args:
        name: Controller name
        config: Dictionary with keys:
            - controller_type: 'fuzzy' (default)
            - target_temperature: Target in °C (default: 20.0)
    """
    controller_type = config.get('controller_type', 'fuzzy').lower()

    if controller_type != 'fuzzy':
        raise ValueError(f"Unknown controller type '{controller_type}'")

    controller = FuzzyFurnaceController(
        name=name,
        target_temperature=float(config.get('target_temperature', 20.0))
    )
    logging.info(f"{name}: Using fuzzy controller (target={controller.target_temperature}°C)")
    return controller


def create_simulation(config: dict) -> FurnaceSimulation:
    """
    Build controller, plant and simulation from a full config dictionary.

    Args:
        config: Dictionary with optional 'controller' and 'simulation' sections
    """
    controller_config = config.get('controller') or {}
    simulation_config = config.get('simulation') or {}

    controller = create_controller(controller_config.get('name', 'furnace'), controller_config)

    plant = ThermalPlant(
        current_temperature=simulation_config.get('initial_temperature', 18.0),
        outside_temperature=simulation_config.get('outside_temperature', 5.0),
        heat_loss_rate=simulation_config.get('heat_loss_rate', 0.5),
        max_heating_rate=simulation_config.get('max_heating_rate', 3.0)
    )

    return FurnaceSimulation(
        controller,
        plant,
        tick_seconds=simulation_config.get('tick_seconds', 1.0),
        history_length=simulation_config.get('history_length', 200)
    )


def main():
    """Main entry point"""
    load_dotenv()

    # Configure logging unless the root logger already has handlers
    log_level = os.environ.get('FURNACE_LOG_LEVEL', 'INFO').upper()
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=getattr(logging, log_level, logging.INFO),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=[
                logging.StreamHandler(),
                logging.FileHandler('furnace_simulation.log')
            ]
        )

    config_file = os.environ.get('FURNACE_CONFIG', 'furnace_config.yaml')
    config = read_config(config_file)
    if not config:
        raise RuntimeError(f"Failed to load config from {config_file}")

    simulation = create_simulation(config)
    steps = int((config.get('simulation') or {}).get('steps', 3600))
    ticks_per_minute = max(1, int(round(60.0 / simulation.tick_seconds)))

    logging.info(f"Starting furnace simulation ({steps} steps) | {simulation.plant}")

    try:
        for step in range(1, steps + 1):
            output = simulation.tick()
            if step % ticks_per_minute == 0:
                logging.info(
                    f"[{simulation.elapsed_label()}] Temp: {simulation.plant.current_temperature:5.2f}°C  →  "
                    f"Target: {simulation.controller.target_temperature:5.2f}°C | "
                    f"Output: {output:5.1f}% | {simulation.temperature_status()}"
                )
    except KeyboardInterrupt:
        logging.info("Simulation interrupted")

    logging.info(f"Simulation finished at {simulation.elapsed_label()} | {simulation.plant}")


if __name__ == '__main__':
    main()
