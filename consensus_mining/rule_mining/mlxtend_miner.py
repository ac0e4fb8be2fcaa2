"""
MLxtend-based partition miner.

Mines the best N rules of a partition by starting at an upper bound for the
minimum support and lowering it step by step until enough rules pass the
metric threshold or the lower bound is reached.
"""
import logging
import time
from typing import Dict, List, Tuple

import pandas as pd
from mlxtend.frequent_patterns import apriori, fpgrowth, association_rules
from mlxtend.preprocessing import TransactionEncoder

from consensus_mining.exceptions import MiningError
from consensus_mining.postprocessing.consensus import rule_to_string
from consensus_mining.preprocessing.dataset import Partition, Schema
from .base import Itemset, MiningAdapter, RunResult
from .parameters import MiningParameters

logger = logging.getLogger(__name__)


class MLxtendMiner(MiningAdapter):
    """
    MLxtend rule miner with Apriori or FP-Growth itemset generation.

    Supports:
    - General association rules (any consequent)
    - Class association rules (consequent restricted to the class attribute)
    """

    def _prepare_data(self, partition: Partition) -> Tuple[pd.DataFrame, Dict[str, Tuple[int, int]]]:
        """
        Convert a partition to one-hot encoded transactions.

        Args:
            partition: Partition with categorical values

        Returns:
            Tuple of (encoded DataFrame, item label -> (attribute index, value index))
        """
        schema = partition.schema
        lookup = {}
        for attr_index, attr in enumerate(schema):
            for value_index, value in enumerate(attr.values):
                lookup[f"{attr.name}__{value}"] = (attr_index, value_index)

        transactions = []
        for row in partition.frame.itertuples(index=False, name=None):
            transaction = []
            for attr, value in zip(schema, row):
                # Skip missing values
                if value is None or pd.isna(value):
                    continue
                label = f"{attr.name}__{value}"
                if label in lookup:
                    transaction.append(label)
            transactions.append(transaction)

        te = TransactionEncoder()
        te_array = te.fit(transactions).transform(transactions)
        df_encoded = pd.DataFrame(te_array, columns=te.columns_)

        return df_encoded, lookup

    def _frequent_itemsets(self, df_encoded: pd.DataFrame, min_support: float,
                           parameters: MiningParameters) -> pd.DataFrame:
        if parameters.algorithm == 'fpgrowth':
            return fpgrowth(df_encoded, min_support=min_support, use_colnames=True,
                            max_len=parameters.max_items)
        return apriori(df_encoded, min_support=min_support, use_colnames=True,
                       max_len=parameters.max_items)

    def _is_class_rule(self, row, lookup: Dict[str, Tuple[int, int]], class_index: int) -> bool:
        consequents = list(row['consequents'])
        if len(consequents) != 1 or lookup[consequents[0]][0] != class_index:
            return False
        return all(lookup[item][0] != class_index for item in row['antecedents'])

    def _mine_at_support(self, df_encoded: pd.DataFrame, min_support: float,
                         parameters: MiningParameters,
                         lookup: Dict[str, Tuple[int, int]]) -> pd.DataFrame:
        frequent_itemsets_df = self._frequent_itemsets(df_encoded, min_support, parameters)

        # Rules need at least one itemset with two items
        if len(frequent_itemsets_df) == 0 or frequent_itemsets_df['itemsets'].apply(len).max() < 2:
            return pd.DataFrame()

        rules_df = association_rules(
            frequent_itemsets_df,
            num_itemsets=len(df_encoded),
            metric=parameters.metric,
            min_threshold=parameters.min_metric
        )

        if parameters.class_association and len(rules_df) > 0:
            mask = rules_df.apply(
                lambda row: self._is_class_rule(row, lookup, parameters.class_index), axis=1
            )
            rules_df = rules_df[mask]

        return rules_df

    def _to_itemset(self, items, lookup: Dict[str, Tuple[int, int]], width: int) -> Itemset:
        return Itemset.from_mapping(dict(lookup[item] for item in items), width)

    def mine(self, partition: Partition, parameters: MiningParameters) -> RunResult:
        """
        Mine the best rules of a partition.

        Args:
            partition: Partition with categorical values
            parameters: Mining parameters

        Returns:
            RunResult with at most parameters.num_rules rules and a run summary
        """
        start_time = time.time()

        if parameters.class_index is not None and parameters.class_index >= partition.schema.num_attributes:
            raise MiningError(
                f"Class index {parameters.class_index} out of range for "
                f"{partition.schema.num_attributes} attributes"
            )

        if partition.num_rows == 0:
            logger.info("%s is empty, no rules mined", partition.name)
            return RunResult([], [], summary=self._format_summary(
                partition, parameters, [], pd.DataFrame(), None, 0, time.time() - start_time
            ))

        df_encoded, lookup = self._prepare_data(partition)

        min_support = parameters.upper_bound_min_support
        cycles = 0
        try:
            while True:
                cycles += 1
                rules_df = self._mine_at_support(df_encoded, min_support, parameters, lookup)
                if len(rules_df) >= parameters.num_rules:
                    break
                next_support = round(min_support - parameters.delta, 10)
                if next_support < parameters.lower_bound_min_support:
                    break
                min_support = next_support
        except ValueError as e:
            raise MiningError(f"Mining failed on {partition.name}: {e}") from e

        if len(rules_df) > 0:
            rules_df = rules_df.sort_values(
                by=[parameters.metric, 'support'], ascending=False, kind='mergesort'
            ).head(parameters.num_rules)

        width = partition.schema.num_attributes
        rules = []
        for _, row in rules_df.iterrows():
            rules.append((
                self._to_itemset(row['antecedents'], lookup, width),
                self._to_itemset(row['consequents'], lookup, width)
            ))

        execution_time = time.time() - start_time
        logger.debug("%s: %d rules after %d cycles (min support %.4f)",
                     partition.name, len(rules), cycles, min_support)

        summary = self._format_summary(partition, parameters, rules, rules_df,
                                       min_support, cycles, execution_time)
        return RunResult.from_rules(rules, summary=summary)

    def _format_summary(self, partition: Partition, parameters: MiningParameters,
                        rules: List[Tuple[Itemset, Itemset]], rules_df: pd.DataFrame,
                        min_support, cycles: int, execution_time: float) -> str:
        schema: Schema = partition.schema.with_class_index(parameters.class_index)
        lines = [
            f"{parameters.algorithm} (mlxtend) on {partition.name}",
            "=" * 40,
            f"Instances: {partition.num_rows} (rows {partition.start}-{partition.stop - 1})",
        ]
        if min_support is not None:
            lines.append(f"Minimum support: {min_support:g} ({round(min_support * partition.num_rows)} instances)")
        lines.append(f"Minimum metric <{parameters.metric}>: {parameters.min_metric:g}")
        lines.append(f"Number of cycles performed: {cycles}")
        lines.append(f"Execution time: {execution_time:.3f}s")
        lines.append("")
        lines.append("Best rules found:" if rules else "No rules found.")

        for k, ((antecedent, consequent), (_, row)) in enumerate(zip(rules, rules_df.iterrows()), start=1):
            lines.append(
                f" {k}. {rule_to_string(antecedent, consequent, schema)}"
                f"   support: {row['support']:.3f}  confidence: {row['confidence']:.3f}  lift: {row['lift']:.3f}"
            )

        return "\n".join(lines)

    def __repr__(self):
        return "MLxtendMiner()"
