"""
Cross-partition rule agreement.

Every pair of runs is compared rule by rule; each pair of identical rules is
one vote for that rule. A rule found by m runs therefore collects
m * (m - 1) / 2 votes.
"""
from collections import Counter
from typing import Dict, List, NamedTuple, Sequence

from consensus_mining.preprocessing.dataset import Schema
from consensus_mining.rule_mining.base import Itemset, RunResult

RULE_ARROW = " ==>  "


class ConsensusEntry(NamedTuple):
    rule: str
    count: int


def to_rule_string(itemset: Itemset, schema: Schema, consequent: bool = False) -> str:
    """
    Render an itemset as "name=value " pairs in attribute order.

    With a class attribute set, the class attribute is left out of the
    listing, except for a consequent consisting of the class item alone,
    which renders as just "<class>=<value> ". A single-item consequent on
    any other attribute is rendered normally.

    Args:
        itemset: Itemset over the schema's attributes
        schema: Schema providing attribute names, domains and class index
        consequent: Whether the itemset is the right-hand side of a rule

    Returns:
        Rendered itemset, each pair followed by a single space
    """
    car = schema.class_index

    if car is not None and consequent and itemset.num_items == 1 and itemset.value_at(car) >= 0:
        class_attr = schema.attribute(car)
        return f"{class_attr.name}={class_attr.value(itemset.value_at(car))} "

    res = ""
    for attr_index, value_index in itemset.items():
        if attr_index == car:
            continue
        attr = schema.attribute(attr_index)
        res += f"{attr.name}={attr.value(value_index)} "
    return res


def rule_to_string(antecedent: Itemset, consequent: Itemset, schema: Schema) -> str:
    return (to_rule_string(antecedent, schema)
            + RULE_ARROW
            + to_rule_string(consequent, schema, consequent=True))


def count_rule_matches(runs: Sequence[RunResult], schema: Schema) -> Dict[str, int]:
    """
    Count votes for every rule two runs agree on.

    Args:
        runs: Collected run results
        schema: Schema used to render matched rules

    Returns:
        Dict of canonical rule string -> number of agreeing run pairs
    """
    matches = Counter()

    for i in range(len(runs) - 1):
        for j in range(i + 1, len(runs)):
            run_i, run_j = runs[i], runs[j]
            for k in range(len(run_i.antecedents)):
                for l in range(len(run_j.antecedents)):
                    if run_i.antecedents[k] != run_j.antecedents[l]:
                        continue
                    if run_i.consequents[k] != run_j.consequents[l]:
                        continue
                    matches[rule_to_string(run_i.antecedents[k], run_i.consequents[k], schema)] += 1

    return dict(matches)


def rank_matches(matches: Dict[str, int]) -> List[ConsensusEntry]:
    """Sort by descending vote count, then by rule string."""
    ranked = sorted(matches.items(), key=lambda item: (-item[1], item[0]))
    return [ConsensusEntry(rule, count) for rule, count in ranked]


def match_rules(
    runs: Sequence[RunResult],
    schema: Schema,
    include_unmatched: bool = False
) -> List[ConsensusEntry]:
    """
    Rank rules by cross-run agreement.

    Args:
        runs: Collected run results, in any order
        schema: Schema (with optional class index) for rule rendering
        include_unmatched: If True, rules found by a single run are reported
                           with a count of 0. By default they are omitted.

    Returns:
        ConsensusEntry list sorted by descending count, ties by rule string
    """
    matches = count_rule_matches(runs, schema)

    if include_unmatched:
        for run in runs:
            for antecedent, consequent in run.rules():
                matches.setdefault(rule_to_string(antecedent, consequent, schema), 0)

    return rank_matches(matches)
