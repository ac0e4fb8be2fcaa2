"""
Thread-safe accumulator for the results of one mining batch.
"""
import logging
import threading
from typing import List, Optional, Tuple

from consensus_mining.postprocessing.consensus import ConsensusEntry, match_rules
from consensus_mining.preprocessing.dataset import Schema
from consensus_mining.rule_mining.base import RunResult

logger = logging.getLogger(__name__)

SUMMARY_SEPARATOR = "\n\n"


class ResultStore:
    """
    Collects run results and run summaries written by concurrent workers.

    Collections only grow. The schema is set once, after every run has been
    collected, and is required before matching.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._runs: List[RunResult] = []
        self._summaries: List[str] = []
        self._schema: Optional[Schema] = None

    def add_run(self, result: RunResult) -> None:
        """
        Append a run result.

        Raises:
            InconsistentRunError: if antecedents and consequents differ in length.
                The run is not stored.
        """
        result.validate()
        with self._lock:
            self._runs.append(result)

    def add_summary(self, text: str) -> None:
        with self._lock:
            self._summaries.append(text + SUMMARY_SEPARATOR)

    def set_schema(self, schema: Schema) -> None:
        with self._lock:
            if self._schema is not None:
                raise RuntimeError("Schema has already been set on this result store")
            self._schema = schema

    @property
    def schema(self) -> Optional[Schema]:
        return self._schema

    @property
    def runs(self) -> Tuple[RunResult, ...]:
        with self._lock:
            return tuple(self._runs)

    @property
    def num_runs(self) -> int:
        with self._lock:
            return len(self._runs)

    @property
    def summary_text(self) -> str:
        with self._lock:
            return "".join(self._summaries)

    def match(self, include_unmatched: bool = False) -> List[ConsensusEntry]:
        """Rank the rules of all collected runs by cross-run agreement."""
        if self._schema is None:
            raise RuntimeError("Schema must be set before matching rules")
        runs = self.runs
        logger.info("Matching rules across %d runs", len(runs))
        return match_rules(runs, self._schema, include_unmatched=include_unmatched)

    def __repr__(self):
        return f"ResultStore(runs={self.num_runs}, schema_set={self._schema is not None})"
