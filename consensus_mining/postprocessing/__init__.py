from .consensus import (
    ConsensusEntry,
    to_rule_string,
    rule_to_string,
    count_rule_matches,
    rank_matches,
    match_rules
)

__all__ = [
    'ConsensusEntry',
    'to_rule_string',
    'rule_to_string',
    'count_rule_matches',
    'rank_matches',
    'match_rules'
]
