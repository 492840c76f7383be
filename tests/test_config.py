from pathlib import Path

import pytest

from config import (
    BenchmarkConfig,
    ProtocolConfig,
    SystemConfig,
    config_from_dict,
    load_config,
    save_config,
)


class TestConfig:

    def test_save_and_load_round_trip(self, tmp_path):
        config = SystemConfig(
            protocol=ProtocolConfig(challenge_mode="sampled", setup_mode="derived",
                                    setup_seed="election", seed=9,
                                    round2_proof_instrumentation=True),
            benchmark=BenchmarkConfig(trials=3),
            log_dir=tmp_path / "logs",
            results_dir=tmp_path / "results",
            log_level="debug",
        )
        path = tmp_path / "config.yaml"
        save_config(config, path)

        loaded = load_config(path)
        assert loaded == config
        assert loaded.log_level == "DEBUG"

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "absent.yaml")
        assert config.protocol.challenge_mode == "fiat_shamir"
        assert config.results_dir == Path("results")

    def test_unreadable_file_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("protocol: {challenge_mode: md5}\n")

        assert load_config(path) == SystemConfig()

    def test_partial_file_fills_defaults(self):
        config = config_from_dict({'protocol': {'seed': 5}})
        assert config.protocol.seed == 5
        assert config.benchmark.trials == 10

    @pytest.mark.parametrize("kwargs", [
        {'challenge_mode': 'md5'},
        {'setup_mode': 'ceremony'},
        {'setup_mode': 'derived'},
    ])
    def test_invalid_protocol_settings(self, kwargs):
        with pytest.raises(ValueError):
            ProtocolConfig(**kwargs)

    def test_invalid_system_settings(self):
        with pytest.raises(ValueError):
            SystemConfig(log_level="loud")
        with pytest.raises(ValueError):
            BenchmarkConfig(trials=0)
