import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List

from config.config import BenchmarkConfig, SystemConfig, config_to_dict, load_config
from tcr import CommitmentBundle, CommitmentEngine, SystemRandomSource, SeededRandomSource, TCRError, genstatement
from utils.utils import (
    PerformanceMonitor,
    create_performance_report,
    format_duration,
    save_results,
    setup_logging,
)

logger = logging.getLogger(__name__)


def build_engine(config: SystemConfig, monitor: PerformanceMonitor = None) -> CommitmentEngine:
    return CommitmentEngine(config.protocol, monitor=monitor if config.enable_monitoring else None)


def run_gen_points(config: SystemConfig) -> bool:
    """Print five freshly sampled generators"""
    if config.protocol.seed is not None:
        rng = SeededRandomSource(config.protocol.seed)
    else:
        rng = SystemRandomSource()

    statement = genstatement(rng)
    for name, point in zip(('g0', 'g1', 'h0', 'h1', 'y'), statement.elements()):
        print(f"{name} {point!r}")
    return True


def run_demo(config: SystemConfig, num_voters: int) -> bool:
    """Deposit, two vote rounds, proof and relation values for each voter"""
    print("=" * 80)
    print("DIRECT-TCR - TWO-ROUND CONFIDENTIAL VOTE COMMITMENTS")
    print("=" * 80)

    monitor = PerformanceMonitor()
    engine = build_engine(config, monitor)

    print(f"\n Challenge strategy: {engine.challenges.name}")
    print(f" Setup: {config.protocol.setup_mode}")
    print(f"\nCommitting {num_voters} voters...")

    participants: List[Dict[str, Any]] = []
    start_time = time.perf_counter()

    for i in range(num_voters):
        voter_id = f"voter_{i:04d}"
        vote = i % 2
        record = engine.run_participant(voter_id, vote=vote, weight=1, amount=100 + i)
        participants.append({
            'participant_id': record.participant_id,
            'deposit': record.deposit,
            'round1': record.round1,
            'round2': record.round2,
            'proof': record.proof,
            'relations': record.relations,
        })
        print(f"  {voter_id}: committed")

    total_time = time.perf_counter() - start_time
    print(f"\n{num_voters} voters committed in {format_duration(total_time)}")

    results = {
        'configuration': config_to_dict(config)['protocol'],
        'statement': engine.statement,
        'participants': participants,
        'benchmarks': monitor.get_summary()['operations'],
    }

    report_path = config.results_dir / "demo_report.json"
    save_results(results, report_path)

    perf_report = create_performance_report(monitor)
    with open(config.results_dir / "performance_report.txt", "w") as f:
        f.write(perf_report)

    print(f"\n Full results saved to: {report_path}")
    return True


def benchmark_operations(engine: CommitmentEngine, benchmark: BenchmarkConfig):
    """Run every builder once per trial; the engine's monitor records the timings"""
    logger.info(f"Benchmarking {benchmark.trials} trials per operation")

    amount = engine.rng.random_scalar()
    witness = engine.new_witness()

    for _ in range(benchmark.trials):
        engine.deposit(amount)
        engine.update(amount)
        round1, x = engine.vote1(1, engine.rng.random_scalar())
        round2 = engine.vote2(1, x)
        if benchmark.include_instrumented_vote2:
            engine.vote2_instrumented(1, x)
        engine.prove(witness)
        engine.evaluate(CommitmentBundle.from_rounds(round1, round2))


def run_benchmark(config: SystemConfig) -> bool:
    """Time each builder over the configured number of trials"""
    monitor = PerformanceMonitor()
    engine = CommitmentEngine(config.protocol, monitor=monitor)
    benchmark_operations(engine, config.benchmark)

    print(create_performance_report(monitor))

    save_results({
        'configuration': config_to_dict(config),
        'benchmarks': monitor.get_summary()['operations'],
    }, config.results_dir / "benchmark_results.json")
    return True


def main():
    parser = argparse.ArgumentParser(
        description='Two-round confidential vote commitments')
    parser.add_argument('--voters', type=int, default=4,
                        help='Number of voters in demo mode')
    parser.add_argument('--config', type=str,
                        default='config.yaml', help='Config file path')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed the entropy source (reproducible, insecure)')
    parser.add_argument('--log-level', type=str.upper, default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Override the configured log level')
    parser.add_argument(
        '--mode', choices=['demo', 'benchmark', 'gen-points'], default='demo')

    args = parser.parse_args()

    config = load_config(Path(args.config))
    if args.seed is not None:
        config.protocol.seed = args.seed
    if args.log_level is not None:
        config.log_level = args.log_level

    setup_logging(config.log_level, log_dir=config.log_dir)

    try:
        if args.mode == 'demo':
            success = run_demo(config, args.voters)
        elif args.mode == 'benchmark':
            success = run_benchmark(config)
        else:
            success = run_gen_points(config)
    except TCRError as e:
        logger.error(f"{args.mode} failed: {e}")
        success = False

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
