"""
Partition Consensus Experiment

Splits a dataset into contiguous partitions, mines the best rules of every
partition in parallel and ranks the rules that several partitions agree on.

Usage:
    consensus-mining --dataset data.csv --partitions 4 --rules-per-partition 20
"""
import argparse
import logging
import sys

from consensus_mining.exceptions import ConfigurationError
from consensus_mining.orchestration.orchestrator import DEFAULT_MAX_WORKERS, DEFAULT_POLL_INTERVAL
from consensus_mining.rule_mining.parameters import MiningParameters, VALID_ALGORITHMS, VALID_METRICS
from consensus_mining.utils.log_setup import setup_logging

from .base import run_consensus_experiment
from .config import (
    ConsensusExperimentConfig, DataConfig, OrchestrationConfig, OutputConfig,
    DEFAULT_NUM_PARTITIONS
)

logger = logging.getLogger(__name__)

TOP_RULES_SHOWN = 10


def build_parser() -> argparse.ArgumentParser:
    defaults = MiningParameters()
    parser = argparse.ArgumentParser(
        prog='consensus-mining',
        description="Mine association rules on dataset partitions and rank cross-partition agreement."
    )
    parser.add_argument('--dataset', required=True, type=str, help="Path to the dataset (csv, xlsx, parquet)")
    parser.add_argument('--partitions', default=DEFAULT_NUM_PARTITIONS, type=int, help="Number of partitions")
    parser.add_argument('--rules-per-partition', default=defaults.num_rules, type=int,
                        help="Number of rules to mine per partition")
    parser.add_argument('--class-index', default=None, type=int,
                        help="1-based class attribute index for class association rules; negative is off")
    parser.add_argument('--workers', default=DEFAULT_MAX_WORKERS, type=int, help="Maximum concurrent mining jobs")
    parser.add_argument('--poll-interval', default=DEFAULT_POLL_INTERVAL, type=float,
                        help="Seconds between progress messages while waiting")
    parser.add_argument('--algorithm', default=defaults.algorithm, choices=VALID_ALGORITHMS,
                        help="Frequent itemset algorithm")
    parser.add_argument('--metric', default=defaults.metric, choices=VALID_METRICS, help="Rule ranking metric")
    parser.add_argument('--min-metric', default=defaults.min_metric, type=float, help="Minimum metric value")
    parser.add_argument('--delta', default=defaults.delta, type=float, help="Support decrement per cycle")
    parser.add_argument('--lower-support', default=defaults.lower_bound_min_support, type=float,
                        help="Lower bound for minimum support")
    parser.add_argument('--upper-support', default=defaults.upper_bound_min_support, type=float,
                        help="Upper bound for minimum support")
    parser.add_argument('--max-items', default=None, type=int, help="Maximum number of items per itemset")
    parser.add_argument('--output-dir', default="./out", type=str, help="Output directory")
    parser.add_argument('--excel', action='store_true', help="Also write an Excel workbook")
    parser.add_argument('--keep-partitions', action='store_true', help="Save every partition as CSV")
    parser.add_argument('--include-unmatched', action='store_true',
                        help="Report rules found by a single partition with 0 votes")
    parser.add_argument('--log-level', default='INFO', type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help="Logging level")
    return parser


def config_from_args(args: argparse.Namespace) -> ConsensusExperimentConfig:
    mining = MiningParameters(
        num_rules=args.rules_per_partition,
        metric=args.metric,
        min_metric=args.min_metric,
        delta=args.delta,
        lower_bound_min_support=args.lower_support,
        upper_bound_min_support=args.upper_support,
        class_index=MiningParameters.class_index_from_cli(args.class_index),
        algorithm=args.algorithm,
        max_items=args.max_items
    )
    return ConsensusExperimentConfig(
        data=DataConfig(path=args.dataset),
        mining=mining,
        orchestration=OrchestrationConfig(
            num_partitions=args.partitions,
            max_workers=args.workers,
            poll_interval=args.poll_interval
        ),
        output=OutputConfig(
            output_dir=args.output_dir,
            excel=args.excel,
            keep_partitions=args.keep_partitions,
            include_unmatched=args.include_unmatched
        )
    )


def run(args: argparse.Namespace) -> int:
    setup_logging(args.log_level)

    print("=" * 70)
    print("PARTITION CONSENSUS RULE MINING")
    print("=" * 70)

    try:
        config = config_from_args(args)
        print(f"Dataset: {config.data.path}")
        print(f"Partitions: {config.orchestration.num_partitions} "
              f"(workers: {config.orchestration.max_workers})")
        print(f"Rules per partition: {config.mining.num_rules}")
        print("=" * 70)

        report = run_consensus_experiment(config)
    except (FileNotFoundError, ConfigurationError) as e:
        logger.error("%s", e)
        return 1

    outcome = report.outcome
    if not outcome.complete:
        logger.warning("%d of %d mining jobs failed; consensus is incomplete",
                       outcome.failed, outcome.submitted)

    print(f"\n{'=' * 70}")
    print("EXPERIMENT COMPLETE")
    print("=" * 70)
    print(f"Jobs: {outcome.succeeded}/{outcome.submitted} succeeded in {outcome.elapsed_seconds:.3f}s")
    print(f"Matched rules: {len(report.entries)}")
    for entry in report.entries[:TOP_RULES_SHOWN]:
        print(f"  {entry.count}: {entry.rule}")
    for name, path in report.output_files.items():
        print(f"Output ({name}): {path}")
    print("=" * 70)
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    return run(parser.parse_args(argv))


if __name__ == '__main__':
    sys.exit(main())
