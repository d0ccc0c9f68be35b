"""
Unit tests for optimizer and service configuration.

Tests cover:
- Defaults and factory configurations
- Parameter validation
- Environment and JSON file loading
- Service settings parsing
"""

import json

import pytest
from pydantic import ValidationError

from src.core.config import Settings
from src.placement.core.config import (
    EvolutionParameters,
    FitnessWeights,
    LoggingConfig,
    MutationSettings,
    PlacementConfig,
    create_default_config,
    create_production_config,
    create_test_config
)


class TestPlacementConfiguration:
    """Test suite for PlacementConfig."""

    def test_default_config_creation(self):
        """Defaults match the reference datacenter run."""
        config = create_default_config()

        assert config.evolution.population_size == 50
        assert config.evolution.max_generations == 20
        assert config.evolution.crossover_rate == 0.8
        assert config.evolution.mutation_rate == 0.1
        assert config.evolution.tournament_size == 3
        assert config.mutation.consolidation_bias == 0.7
        assert config.logging.log_interval == 5
        assert config.parallelization.enable_parallel is False
        assert config.random_seed is None

    def test_default_fitness_weights(self):
        weights = FitnessWeights()

        assert weights.overload == 10.0
        assert weights.low_utilization_threshold == 0.3
        assert weights.low_utilization == 2.0
        assert weights.residual_waste == 0.5
        assert weights.active_node == 3.0
        assert weights.communication == 1.0

    def test_config_from_environment(self, monkeypatch):
        """Test loading configuration from environment variables."""
        monkeypatch.setenv("PLACEMENT_POPULATION_SIZE", "80")
        monkeypatch.setenv("PLACEMENT_MAX_GENERATIONS", "40")
        monkeypatch.setenv("PLACEMENT_MUTATION_RATE", "0.25")
        monkeypatch.setenv("PLACEMENT_NUM_WORKERS", "4")
        monkeypatch.setenv("PLACEMENT_RANDOM_SEED", "42")

        config = PlacementConfig.from_env()

        assert config.evolution.population_size == 80
        assert config.evolution.max_generations == 40
        assert config.evolution.mutation_rate == 0.25
        assert config.evolution.crossover_rate == 0.8
        assert config.parallelization.enable_parallel is True
        assert config.parallelization.num_workers == 4
        assert config.random_seed == 42

    def test_config_from_empty_environment(self, monkeypatch):
        for name in ("PLACEMENT_POPULATION_SIZE", "PLACEMENT_RANDOM_SEED", "PLACEMENT_NUM_WORKERS"):
            monkeypatch.delenv(name, raising=False)

        config = PlacementConfig.from_env()

        assert config.evolution.population_size == 50
        assert config.random_seed is None

    def test_config_save_and_load(self, tmp_path):
        config = create_test_config()
        path = tmp_path / "config.json"

        config.save(str(path))
        data = json.loads(path.read_text())
        assert data["evolution"]["population_size"] == 12
        assert data["random_seed"] == 42

        loaded = PlacementConfig.load(str(path))
        assert loaded == config

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            PlacementConfig(generations=10)

    def test_assignment_is_validated(self):
        config = PlacementConfig()

        with pytest.raises(ValidationError):
            config.random_seed = "not-a-seed"

    def test_test_and_production_configs(self):
        test_config = create_test_config()
        production = create_production_config()

        assert test_config.random_seed == 42
        assert test_config.logging.metrics_export is False
        assert test_config.evolution.population_size < production.evolution.population_size
        assert production.parallelization.enable_parallel is True


class TestEvolutionParameterValidation:
    """Test suite for evolution parameter bounds."""

    def test_valid_parameters(self):
        params = EvolutionParameters(
            population_size=10,
            max_generations=0,
            crossover_rate=0.0,
            mutation_rate=1.0,
            tournament_size=10
        )
        assert params.tournament_size == 10

    @pytest.mark.parametrize("field,value", [
        ("population_size", 0),
        ("max_generations", -1),
        ("crossover_rate", 1.5),
        ("crossover_rate", -0.1),
        ("mutation_rate", 2.0),
        ("tournament_size", 0),
    ])
    def test_out_of_range_rejected(self, field, value):
        with pytest.raises(ValidationError):
            EvolutionParameters(**{field: value})

    def test_tournament_larger_than_population_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            EvolutionParameters(population_size=2, tournament_size=3)

        assert "Tournament size" in str(exc_info.value)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            EvolutionParameters(population_size=0)

    def test_mutation_bias_bounds(self):
        assert MutationSettings(consolidation_bias=1.0).consolidation_bias == 1.0
        with pytest.raises(ValidationError):
            MutationSettings(consolidation_bias=1.2)

    def test_log_interval_bounds(self):
        with pytest.raises(ValidationError):
            LoggingConfig(log_interval=0)
        with pytest.raises(ValidationError):
            LoggingConfig(log_level="VERBOSE")


class TestServiceSettings:
    """Test suite for service settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.app_name == "Energy-Aware Placement Optimizer"
        assert settings.api_v1_prefix == "/api/v1"
        assert settings.cors_origins == ["*"]
        assert not settings.is_production()

    def test_cors_origins_from_environment(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "http://a.example, http://b.example")

        settings = Settings(_env_file=None)

        assert settings.cors_origins == ["http://a.example", "http://b.example"]

    def test_logfire_settings_without_token(self):
        settings = Settings(_env_file=None, logfire_token="")

        logfire_settings = settings.get_logfire_settings()

        assert logfire_settings["token"] is None
        assert logfire_settings["send_to_logfire"] == "if-token-present"
        assert logfire_settings["service_name"] == "placement-optimizer"

    def test_production_environment(self):
        assert Settings(_env_file=None, environment="Production").is_production()
