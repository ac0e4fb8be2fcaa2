import logging
import pandas as pd
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Any, Sequence, Union

from consensus_mining.postprocessing.consensus import ConsensusEntry
from consensus_mining.preprocessing.dataset import Partition
from consensus_mining.orchestration.orchestrator import BatchOutcome
from consensus_mining.orchestration.store import SUMMARY_SEPARATOR

logger = logging.getLogger(__name__)


def format_rule_matches(entries: Sequence[ConsensusEntry]) -> str:
    return "".join(f"{entry.count}: {entry.rule}\n" for entry in entries)


def save_rule_matches(entries: Sequence[ConsensusEntry], output_path: Union[str, Path]) -> Path:
    """
    Write ranked rule matches, one "<count>: <rule>" line per entry.

    Args:
        entries: Ranked consensus entries
        output_path: Output file path
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(format_rule_matches(entries), encoding='utf-8')
    logger.info("Rule matches saved to: %s", output_path)
    return output_path


def save_run_summaries(summary_text: str, output_path: Union[str, Path]) -> Path:
    """Write the accumulated run summaries unchanged."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(summary_text, encoding='utf-8')
    logger.info("Run summaries saved to: %s", output_path)
    return output_path


def save_partitions(partitions: Sequence[Partition], output_dir: Union[str, Path]) -> List[Path]:
    """
    Save every partition as CSV, named by partition index.

    Args:
        partitions: Partitions to save
        output_dir: Directory receiving <index>.csv files
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for partition in partitions:
        path = output_dir / f"{partition.index}.csv"
        partition.frame.to_csv(path, index=False)
        paths.append(path)

    logger.info("Saved %d partitions to: %s", len(paths), output_dir)
    return paths


def save_consensus_results(
    entries: Sequence[ConsensusEntry],
    summary_text: str,
    outcome: BatchOutcome,
    output_path: Union[str, Path],
    parameters: Dict[str, Any] = None,
    metadata: Dict[str, Any] = None
) -> Path:
    """
    Save consensus results to Excel with multiple sheets.

    Sheets:
        - Rule Matches: Ranked rules with vote counts
        - Run Summaries: One row per collected run summary
        - Batch Summary: Job counts, elapsed time and metadata
        - Parameters: Mining and orchestration parameters used

    Args:
        entries: Ranked consensus entries
        summary_text: Accumulated run summaries
        outcome: Batch outcome from the orchestrator
        output_path: Output file path (will add .xlsx if needed)
        parameters: Parameters used
        metadata: Additional metadata (dataset name, etc.)
    """
    output_path = Path(output_path)
    if output_path.suffix != '.xlsx':
        output_path = output_path.with_suffix('.xlsx')
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
        # Sheet 1: Rule Matches
        matches_df = pd.DataFrame(
            [{'rank': i, 'votes': e.count, 'rule': e.rule} for i, e in enumerate(entries, start=1)],
            columns=['rank', 'votes', 'rule']
        )
        matches_df.to_excel(writer, sheet_name='Rule Matches', index=False)

        # Sheet 2: Run Summaries
        summaries = [s for s in summary_text.split(SUMMARY_SEPARATOR) if s.strip()]
        summaries_df = pd.DataFrame({
            'run': list(range(1, len(summaries) + 1)),
            'summary': summaries
        })
        summaries_df.to_excel(writer, sheet_name='Run Summaries', index=False)

        # Sheet 3: Batch Summary
        summary_data = {'Metric': [], 'Value': []}
        for k, v in outcome.to_dict().items():
            summary_data['Metric'].append(k)
            summary_data['Value'].append(v)
        summary_data['Metric'].extend(['num_matched_rules', 'timestamp'])
        summary_data['Value'].extend([len(entries), datetime.now().isoformat()])
        if metadata:
            for k, v in metadata.items():
                summary_data['Metric'].append(k)
                summary_data['Value'].append(v)
        summary_df = pd.DataFrame(summary_data)
        summary_df.to_excel(writer, sheet_name='Batch Summary', index=False)

        # Sheet 4: Parameters
        if parameters:
            params_df = pd.DataFrame({
                'Parameter': list(parameters.keys()),
                'Value': [str(v) for v in parameters.values()]
            })
            params_df.to_excel(writer, sheet_name='Parameters', index=False)

    logger.info("Results saved to: %s", output_path)
    return output_path
