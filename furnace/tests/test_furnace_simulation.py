"""
Tests for the headless furnace simulation driver and configuration
"""

import logging
import pytest
import sys
import os
from datetime import datetime, timedelta
from unittest.mock import MagicMock

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from furnace_simulation import (
    ThermalPlant, FurnaceSimulation, create_controller, create_simulation, main
)
from fuzzy_controller import FuzzyFurnaceController
from heating_controller_base import HeatingController
from furnace_config import read_config

START = datetime(2024, 1, 15, 8, 0, 0)

CONFIG_YAML = """
controller:
  name: test_furnace
  controller_type: fuzzy
  target_temperature: 21.0
simulation:
  initial_temperature: 17.0
  outside_temperature: 2.0
  heat_loss_rate: 0.4
  max_heating_rate: 3.0
  tick_seconds: 2.0
  history_length: 50
  steps: 90
"""


@pytest.fixture
def simulation():
    controller = FuzzyFurnaceController(name="furnace", target_temperature=20.0)
    plant = ThermalPlant(current_temperature=18.0, outside_temperature=5.0)
    return FurnaceSimulation(controller, plant, tick_seconds=1.0, history_length=200, start_time=START)


class TestThermalPlant:
    """Test plant physics"""

    def test_full_heating_without_loss(self):
        """Test 100% output for one minute adds max_heating_rate"""
        plant = ThermalPlant(current_temperature=5.0, outside_temperature=5.0, max_heating_rate=3.0)
        assert plant.step(100.0, dt_seconds=60.0) == pytest.approx(8.0)

    def test_cooling_towards_outside(self):
        """Test heat loss with the furnace off"""
        plant = ThermalPlant(current_temperature=15.0, outside_temperature=5.0, heat_loss_rate=0.5)
        # 10°C difference * 0.5 / 10 = 0.5°C per minute
        assert plant.step(0.0, dt_seconds=60.0) == pytest.approx(14.5)

    def test_default_tick_is_one_second(self):
        """Test default step length"""
        plant = ThermalPlant(current_temperature=5.0, outside_temperature=5.0, max_heating_rate=3.0)
        assert plant.step(100.0) == pytest.approx(5.05)


class TestFurnaceSimulation:
    """Test simulation driver"""

    def test_tick_injects_simulated_time(self):
        """Test controller receives the simulated clock"""
        controller = MagicMock(spec=HeatingController)
        controller.calculate_output.return_value = 50.0
        plant = ThermalPlant(current_temperature=18.0)
        sim = FurnaceSimulation(controller, plant, tick_seconds=2.0, start_time=START)

        sim.tick()
        sim.tick()

        calls = controller.calculate_output.call_args_list
        assert calls[0].args == (18.0, START)
        assert calls[1].args[1] == START + timedelta(seconds=2)
        assert sim.now == START + timedelta(seconds=4)

    def test_first_tick_output(self, simulation):
        """Test first output uses zero rate at 2°C error"""
        # positive_big 0.8/1.1 at 100% and positive_small AND zero 0.3/1.1 at 60%
        assert simulation.tick() == pytest.approx(98.0 / 1.1)
        assert len(simulation.temperature_history) == 1
        assert len(simulation.output_history) == 1

    def test_history_is_bounded(self):
        """Test history drops the oldest samples beyond history_length"""
        controller = FuzzyFurnaceController(name="furnace")
        sim = FurnaceSimulation(controller, ThermalPlant(), history_length=5, start_time=START)

        outputs = sim.run(10)

        assert len(outputs) == 10
        assert len(sim.temperature_history) == 5
        assert list(sim.output_history) == outputs[-5:]

    def test_run_stays_within_limits(self, simulation):
        """Test an hour of control keeps outputs and temperature sane"""
        outputs = simulation.run(3600)

        assert all(0.0 <= output <= 100.0 for output in outputs)
        assert 15.0 < simulation.plant.current_temperature < 25.0

    def test_reset(self, simulation):
        """Test reset restarts plant, clock, history and controller"""
        simulation.run(30)
        simulation.reset()

        assert simulation.plant.current_temperature == 10.0
        assert simulation.elapsed_seconds == 0.0
        assert simulation.now == START
        assert len(simulation.temperature_history) == 0
        assert simulation.controller.estimator.previous_timestamp is None

    def test_elapsed_label(self, simulation):
        """Test simulated time formatting"""
        assert simulation.elapsed_label() == "00:00"
        simulation.run(75)
        assert simulation.elapsed_label() == "01:15"

    def test_temperature_status(self, simulation):
        """Test status relative to the target band"""
        simulation.plant.current_temperature = 19.7
        assert simulation.temperature_status() == 'at_target'
        simulation.plant.current_temperature = 18.0
        assert simulation.temperature_status() == 'below_target'
        simulation.plant.current_temperature = 21.0
        assert simulation.temperature_status() == 'above_target'

    def test_invalid_tick(self):
        """Test tick length must be positive"""
        with pytest.raises(ValueError):
            FurnaceSimulation(FuzzyFurnaceController(name="x"), ThermalPlant(), tick_seconds=0)


class TestConfiguration:
    """Test config loading and factories"""

    def test_read_config(self, tmp_path):
        """Test YAML config is parsed"""
        config_file = tmp_path / "furnace_config.yaml"
        config_file.write_text(CONFIG_YAML)

        config = read_config(str(config_file))
        assert config['controller']['target_temperature'] == 21.0
        assert config['simulation']['steps'] == 90

    def test_read_config_missing_file(self, tmp_path):
        """Test missing config returns None"""
        assert read_config(str(tmp_path / "missing.yaml")) is None

    def test_read_config_invalid_yaml(self, tmp_path):
        """Test malformed YAML returns None"""
        config_file = tmp_path / "broken.yaml"
        config_file.write_text("controller: [unclosed\n")
        assert read_config(str(config_file)) is None

    def test_create_controller_defaults(self):
        """Test fuzzy controller is the default"""
        controller = create_controller("furnace", {})
        assert isinstance(controller, FuzzyFurnaceController)
        assert controller.target_temperature == 20.0

    def test_create_controller_ignores_output_limits(self):
        """Test output limits from config cannot keep a too-hot furnace heating"""
        controller = create_controller("furnace", {'target_temperature': 20.0, 'output_limits': [20.0, 100.0]})
        assert controller.calculate_output(25.0, START) == 0.0

    def test_create_controller_unknown_type(self):
        """Test unknown controller types are rejected"""
        with pytest.raises(ValueError):
            create_controller("furnace", {'controller_type': 'pid'})

    def test_create_simulation(self, tmp_path):
        """Test simulation is built from all config sections"""
        config_file = tmp_path / "furnace_config.yaml"
        config_file.write_text(CONFIG_YAML)

        sim = create_simulation(read_config(str(config_file)))

        assert sim.controller.name == "test_furnace"
        assert sim.controller.target_temperature == 21.0
        assert sim.plant.current_temperature == 17.0
        assert sim.plant.outside_temperature == 2.0
        assert sim.plant.heat_loss_rate == 0.4
        assert sim.tick_seconds == 2.0
        assert sim.temperature_history.maxlen == 50

    def test_create_simulation_empty_config(self):
        """Test defaults are used when sections are missing"""
        sim = create_simulation({})
        assert sim.controller.target_temperature == 20.0
        assert sim.plant.current_temperature == 18.0
        assert sim.temperature_history.maxlen == 200


class TestMain:
    """Test the command-line entry point"""

    def test_main_runs_configured_steps(self, tmp_path, monkeypatch):
        """Test main loads the config from the environment and runs"""
        config_file = tmp_path / "furnace_config.yaml"
        config_file.write_text(CONFIG_YAML)
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv('FURNACE_CONFIG', str(config_file))
        monkeypatch.setenv('FURNACE_LOG_LEVEL', 'WARNING')

        with monkeypatch.context() as m:
            runs = []
            original_tick = FurnaceSimulation.tick

            def counting_tick(self):
                runs.append(1)
                return original_tick(self)

            m.setattr(FurnaceSimulation, 'tick', counting_tick)
            main()

        assert len(runs) == 90

    def test_main_missing_config(self, tmp_path, monkeypatch):
        """Test main fails when the config cannot be loaded"""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv('FURNACE_CONFIG', str(tmp_path / "missing.yaml"))

        with pytest.raises(RuntimeError):
            main()

    def test_main_empty_simulation_section(self, tmp_path, monkeypatch):
        """Test main falls back to defaults when the simulation section is empty"""
        config_file = tmp_path / "furnace_config.yaml"
        config_file.write_text("controller:\n  target_temperature: 20.0\nsimulation:\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv('FURNACE_CONFIG', str(config_file))

        runs = []
        original_tick = FurnaceSimulation.tick

        def counting_tick(self):
            runs.append(1)
            return original_tick(self)

        monkeypatch.setattr(FurnaceSimulation, 'tick', counting_tick)
        main()

        assert len(runs) == 3600

    def test_main_keeps_existing_logging(self, tmp_path, monkeypatch):
        """Test main does not open its log file when logging is already configured"""
        config_file = tmp_path / "furnace_config.yaml"
        config_file.write_text(CONFIG_YAML)
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv('FURNACE_CONFIG', str(config_file))

        handler = logging.NullHandler()
        root = logging.getLogger()
        root.addHandler(handler)
        try:
            main()
        finally:
            root.removeHandler(handler)

        assert not (tmp_path / "furnace_simulation.log").exists()
