from .report_io import (
    save_rule_matches,
    save_run_summaries,
    save_partitions,
    save_consensus_results
)
from .log_setup import setup_logging

__all__ = [
    'save_rule_matches',
    'save_run_summaries',
    'save_partitions',
    'save_consensus_results',
    'setup_logging'
]
