import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

CHALLENGE_MODES = ("fiat_shamir", "sampled")
SETUP_MODES = ("random", "derived")


@dataclass
class ProtocolConfig:
    challenge_mode: str = "fiat_shamir"
    transcript_label: str = "direct-tcr"
    setup_mode: str = "random"
    setup_seed: Optional[str] = None
    # Seeds the entropy source; only for reproducible runs, never production
    seed: Optional[int] = None
    round2_proof_instrumentation: bool = False

    def __post_init__(self):
        if self.challenge_mode not in CHALLENGE_MODES:
            raise ValueError(
                f"challenge_mode must be one of {CHALLENGE_MODES}, got '{self.challenge_mode}'")
        if self.setup_mode not in SETUP_MODES:
            raise ValueError(
                f"setup_mode must be one of {SETUP_MODES}, got '{self.setup_mode}'")
        if self.setup_mode == "derived" and not self.setup_seed:
            raise ValueError("setup_mode 'derived' requires a setup_seed")


@dataclass
class BenchmarkConfig:
    trials: int = 10
    include_instrumented_vote2: bool = True

    def __post_init__(self):
        if self.trials < 1:
            raise ValueError("Benchmark trials must be positive")


@dataclass
class SystemConfig:
    protocol: ProtocolConfig = field(default_factory=ProtocolConfig)
    benchmark: BenchmarkConfig = field(default_factory=BenchmarkConfig)

    log_dir: Path = field(default_factory=lambda: Path("logs"))
    results_dir: Path = field(default_factory=lambda: Path("results"))
    log_level: str = "INFO"
    enable_monitoring: bool = True

    def __post_init__(self):
        self.log_dir = Path(self.log_dir)
        self.results_dir = Path(self.results_dir)
        self.log_level = self.log_level.upper()

        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level '{self.log_level}'")


def config_from_dict(config_data: Dict[str, Any]) -> SystemConfig:
    """Build a SystemConfig from parsed YAML, defaulting absent keys"""
    protocol_data = config_data.get('protocol', {}) or {}
    protocol = ProtocolConfig(
        challenge_mode=protocol_data.get('challenge_mode', 'fiat_shamir'),
        transcript_label=protocol_data.get('transcript_label', 'direct-tcr'),
        setup_mode=protocol_data.get('setup_mode', 'random'),
        setup_seed=protocol_data.get('setup_seed'),
        seed=protocol_data.get('seed'),
        round2_proof_instrumentation=protocol_data.get(
            'round2_proof_instrumentation', False)
    )

    benchmark_data = config_data.get('benchmark', {}) or {}
    benchmark = BenchmarkConfig(
        trials=benchmark_data.get('trials', 10),
        include_instrumented_vote2=benchmark_data.get(
            'include_instrumented_vote2', True)
    )

    return SystemConfig(
        protocol=protocol,
        benchmark=benchmark,
        log_dir=Path(config_data.get('log_dir', 'logs')),
        results_dir=Path(config_data.get('results_dir', 'results')),
        log_level=config_data.get('log_level', 'INFO'),
        enable_monitoring=config_data.get('enable_monitoring', True)
    )


def config_to_dict(config: SystemConfig) -> Dict[str, Any]:
    return {
        'protocol': {
            'challenge_mode': config.protocol.challenge_mode,
            'transcript_label': config.protocol.transcript_label,
            'setup_mode': config.protocol.setup_mode,
            'setup_seed': config.protocol.setup_seed,
            'seed': config.protocol.seed,
            'round2_proof_instrumentation': config.protocol.round2_proof_instrumentation
        },
        'benchmark': {
            'trials': config.benchmark.trials,
            'include_instrumented_vote2': config.benchmark.include_instrumented_vote2
        },
        'log_dir': str(config.log_dir),
        'results_dir': str(config.results_dir),
        'log_level': config.log_level,
        'enable_monitoring': config.enable_monitoring
    }


def load_config(config_path: Optional[Path] = None) -> SystemConfig:
    """Load configuration from file or return default"""
    if config_path is None:
        config_path = Path("config.yaml")
    config_path = Path(config_path)

    if config_path.exists():
        try:
            with open(config_path, 'r') as f:
                config_data = yaml.safe_load(f) or {}
            return config_from_dict(config_data)
        except (OSError, yaml.YAMLError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Could not load config file {config_path}: {e}")
            logger.warning("Using default configuration")

    return SystemConfig()


def save_config(config: SystemConfig, config_path: Optional[Path] = None):
    """Save configuration to YAML file"""
    if config_path is None:
        config_path = Path("config.yaml")
    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        yaml.dump(config_to_dict(config), f, default_flow_style=False)
