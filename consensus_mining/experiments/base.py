import logging
import pandas as pd
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Dict, Optional

from consensus_mining.exceptions import ConfigurationError
from consensus_mining.orchestration.orchestrator import BatchOutcome, JobOrchestrator
from consensus_mining.orchestration.store import ResultStore
from consensus_mining.postprocessing.consensus import ConsensusEntry
from consensus_mining.preprocessing.dataset import Dataset, Schema
from consensus_mining.preprocessing.partitioning import partition_dataset
from consensus_mining.rule_mining.base import MiningAdapter
from consensus_mining.rule_mining.mlxtend_miner import MLxtendMiner
from consensus_mining.utils.report_io import (
    save_rule_matches, save_run_summaries, save_partitions, save_consensus_results
)

from .config import ConsensusExperimentConfig, DataConfig

logger = logging.getLogger(__name__)


@dataclass
class ConsensusReport:
    entries: List[ConsensusEntry]
    summary_text: str
    outcome: BatchOutcome
    schema: Schema
    output_files: Dict[str, Path] = field(default_factory=dict)


def load_data(config: DataConfig) -> Dataset:
    path = Path(config.path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found: {path}")

    if path.suffix == '.csv':
        df = pd.read_csv(path, dtype=str, keep_default_na=True)
    elif path.suffix in ['.xlsx', '.xls']:
        df = pd.read_excel(path)
    elif path.suffix == '.parquet':
        df = pd.read_parquet(path)
    else:
        raise ConfigurationError(f"Unsupported file format: {path.suffix}")

    return Dataset.from_frame(df, name=config.name)


def create_miner(miner_type: str = 'mlxtend') -> MiningAdapter:
    miner_type = miner_type.lower()

    if miner_type == 'mlxtend':
        return MLxtendMiner()

    raise ConfigurationError(f"Unknown miner type: {miner_type}")


def run_consensus_experiment(
    config: ConsensusExperimentConfig,
    miner: Optional[MiningAdapter] = None,
    dataset: Optional[Dataset] = None
) -> ConsensusReport:
    """
    Mine every partition of a dataset and rank the rules they agree on.

    Args:
        config: Experiment configuration
        miner: Mining adapter (default: created from config.miner_type)
        dataset: Already loaded dataset (default: loaded from config.data)

    Returns:
        ConsensusReport with ranked entries, run summaries and job outcome
    """
    if dataset is None:
        dataset = load_data(config.data)
    logger.info("Loaded %s: %d rows, %d attributes",
                dataset.name, dataset.num_rows, dataset.schema.num_attributes)

    class_index = config.mining.class_index
    if class_index is not None and class_index >= dataset.schema.num_attributes:
        raise ConfigurationError(
            f"Class index {class_index + 1} out of range for {dataset.schema.num_attributes} attributes"
        )

    partitions = partition_dataset(dataset, config.orchestration.num_partitions)
    logger.info("Created %d partitions", len(partitions))

    output_path = config.output.get_output_path()
    output_files = {}

    if config.output.keep_partitions:
        save_partitions(partitions, output_path / "partitions")
        output_files['partitions'] = output_path / "partitions"

    store = ResultStore()
    orchestrator = JobOrchestrator(
        miner if miner is not None else create_miner(config.miner_type),
        store,
        max_workers=config.orchestration.max_workers,
        poll_interval=config.orchestration.poll_interval
    )
    outcome = orchestrator.run(partitions, config.mining)

    # Class association mode only changes how the collected rules are rendered
    schema = dataset.schema.with_class_index(class_index)
    store.set_schema(schema)

    entries = store.match(include_unmatched=config.output.include_unmatched)
    summary_text = store.summary_text

    output_files['matches'] = save_rule_matches(entries, output_path / config.output.matches_filename)
    output_files['rules'] = save_run_summaries(summary_text, output_path / config.output.rules_filename)

    if config.output.excel:
        output_files['excel'] = save_consensus_results(
            entries,
            summary_text,
            outcome,
            output_path / f"{dataset.name}_consensus",
            parameters=config.to_dict(),
            metadata={'dataset': dataset.name, 'num_rows': dataset.num_rows}
        )

    return ConsensusReport(
        entries=entries,
        summary_text=summary_text,
        outcome=outcome,
        schema=schema,
        output_files=output_files
    )
