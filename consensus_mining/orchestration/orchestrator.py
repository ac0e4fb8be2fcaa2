"""
Bounded-concurrency execution of one mining job per partition.
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor, wait, ALL_COMPLETED
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from consensus_mining.exceptions import ConfigurationError
from consensus_mining.postprocessing.consensus import rule_to_string
from consensus_mining.preprocessing.dataset import Partition
from consensus_mining.rule_mining.base import MiningAdapter, RunResult
from consensus_mining.rule_mining.parameters import MiningParameters
from .store import ResultStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8
DEFAULT_POLL_INTERVAL = 5.0


@dataclass
class JobFailure:
    partition_index: int
    partition_name: str
    error: str


@dataclass
class BatchOutcome:
    """Terminal state of every job of a batch."""
    submitted: int
    succeeded: int
    failed: int
    elapsed_seconds: float
    failures: List[JobFailure] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'submitted': self.submitted,
            'succeeded': self.succeeded,
            'failed': self.failed,
            'elapsed_seconds': round(self.elapsed_seconds, 3),
            'failures': '; '.join(f"{f.partition_name}: {f.error}" for f in self.failures)
        }


def default_run_summary(partition: Partition, parameters: MiningParameters, result: RunResult) -> str:
    """Summary used when a miner does not describe its own run."""
    schema = partition.schema.with_class_index(parameters.class_index)
    lines = [f"{partition.name}: {len(result)} rules"]
    for k, (antecedent, consequent) in enumerate(result.rules(), start=1):
        lines.append(f" {k}. {rule_to_string(antecedent, consequent, schema)}")
    return "\n".join(lines)


class JobOrchestrator:
    """
    Runs a miner on every partition using a fixed-size thread pool.

    A job that raises is logged and recorded as a failure; it adds nothing to
    the result store and does not affect the other jobs.
    """

    def __init__(
        self,
        miner: MiningAdapter,
        store: ResultStore,
        max_workers: int = DEFAULT_MAX_WORKERS,
        poll_interval: float = DEFAULT_POLL_INTERVAL
    ):
        """
        Args:
            miner: Mining adapter invoked once per partition
            store: Result store receiving successful runs
            max_workers: Maximum number of concurrently running jobs
            poll_interval: Seconds between "still waiting" log lines
        """
        if max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {max_workers}")
        if poll_interval <= 0:
            raise ConfigurationError(f"poll_interval must be > 0, got {poll_interval}")
        self.miner = miner
        self.store = store
        self.max_workers = max_workers
        self.poll_interval = poll_interval

    def _run_job(self, partition: Partition, parameters: MiningParameters):
        logger.debug("Mining %s (%d rows)", partition.name, partition.num_rows)
        try:
            result = self.miner.mine(partition, parameters)
            summary = result.summary
            if summary is None:
                summary = default_run_summary(partition, parameters, result)
            # Nothing reaches the store until the summary has rendered
            self.store.add_run(result)
            self.store.add_summary(summary)
        except Exception as e:
            logger.exception("Mining job for %s failed", partition.name)
            return JobFailure(partition.index, partition.name, f"{type(e).__name__}: {e}")

        logger.debug("Finished %s with %d rules", partition.name, len(result))
        return None

    def run(self, partitions: Sequence[Partition], parameters: MiningParameters) -> BatchOutcome:
        """
        Mine every partition and block until all jobs have finished.

        Args:
            partitions: Partitions to mine, one job each
            parameters: Mining parameters shared by all jobs

        Returns:
            BatchOutcome with success and failure counts
        """
        start = time.time()

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            pending = {executor.submit(self._run_job, p, parameters) for p in partitions}
            futures = list(pending)
            logger.info("All %d jobs submitted to %d workers, waiting for results",
                        len(futures), self.max_workers)

            while pending:
                _, pending = wait(pending, timeout=self.poll_interval, return_when=ALL_COMPLETED)
                if pending:
                    logger.info("Still waiting (%d of %d jobs running or queued)",
                                len(pending), len(futures))

        failures = [f.result() for f in futures if f.result() is not None]
        failures.sort(key=lambda f: f.partition_index)
        elapsed = time.time() - start

        outcome = BatchOutcome(
            submitted=len(futures),
            succeeded=len(futures) - len(failures),
            failed=len(failures),
            elapsed_seconds=elapsed,
            failures=failures
        )

        logger.info("All jobs finished in %.3fs: %d succeeded, %d failed",
                    elapsed, outcome.succeeded, outcome.failed)
        if failures:
            logger.warning("Consensus will be computed from %d of %d partitions",
                           outcome.succeeded, outcome.submitted)
        return outcome
