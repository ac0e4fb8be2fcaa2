"""Tests for rule canonicalization and cross-run matching."""

import random

import pytest

from consensus_mining.postprocessing.consensus import (
    ConsensusEntry, count_rule_matches, match_rules, rank_matches, rule_to_string, to_rule_string
)
from consensus_mining.preprocessing.dataset import Attribute, Schema
from consensus_mining.rule_mining.base import Itemset

from helpers import make_itemset, make_run

RED_LARGE = ({'color': 'red'}, {'size': 'large'})
BLUE_SMALL = ({'color': 'blue'}, {'size': 'small'})


@pytest.fixture
def weather_schema() -> Schema:
    return Schema((
        Attribute('outlook', ('sunny', 'rainy')),
        Attribute('windy', ('no', 'yes')),
        Attribute('play', ('no', 'yes')),
    ))


class TestToRuleString:
    def test_assigned_attributes_in_schema_order(self, weather_schema) -> None:
        itemset = make_itemset(weather_schema, play='yes', outlook='sunny')
        assert to_rule_string(itemset, weather_schema) == "outlook=sunny play=yes "

    def test_empty_itemset_renders_empty(self, weather_schema) -> None:
        itemset = Itemset.from_mapping({}, weather_schema.num_attributes)
        assert to_rule_string(itemset, weather_schema) == ""

    def test_class_attribute_skipped_in_class_mode(self, weather_schema) -> None:
        schema = weather_schema.with_class_index(2)
        itemset = make_itemset(schema, outlook='rainy', play='no')
        assert to_rule_string(itemset, schema) == "outlook=rainy "

    def test_class_consequent_renders_class_only(self, weather_schema) -> None:
        schema = weather_schema.with_class_index(2)
        itemset = make_itemset(schema, play='yes')
        assert to_rule_string(itemset, schema, consequent=True) == "play=yes "

    def test_single_item_antecedent_not_treated_as_class(self, weather_schema) -> None:
        schema = weather_schema.with_class_index(2)
        itemset = make_itemset(schema, windy='yes')
        assert to_rule_string(itemset, schema) == "windy=yes "
        assert to_rule_string(itemset, schema, consequent=True) == "windy=yes "

    def test_rule_string_format(self, color_size_schema) -> None:
        antecedent = make_itemset(color_size_schema, color='red')
        consequent = make_itemset(color_size_schema, size='large')
        assert rule_to_string(antecedent, consequent, color_size_schema) == "color=red  ==>  size=large "

    def test_equal_strings_iff_equal_assignments(self, weather_schema) -> None:
        """Every pair of itemsets renders identically exactly when they are equal."""
        itemsets = []
        for outlook in (-1, 0, 1):
            for windy in (-1, 0, 1):
                for play in (-1, 0, 1):
                    itemsets.append(Itemset((outlook, windy, play)))

        for a in itemsets:
            for b in itemsets:
                same_string = to_rule_string(a, weather_schema) == to_rule_string(b, weather_schema)
                assert same_string == (a == b)


class TestCountRuleMatches:
    def test_example_from_three_runs(self, color_size_schema) -> None:
        runs = [
            make_run(color_size_schema, RED_LARGE),
            make_run(color_size_schema, RED_LARGE),
            make_run(color_size_schema, BLUE_SMALL),
        ]
        assert match_rules(runs, color_size_schema) == [("color=red  ==>  size=large ", 1)]

    def test_unmatched_rules_included_on_request(self, color_size_schema) -> None:
        runs = [
            make_run(color_size_schema, RED_LARGE),
            make_run(color_size_schema, RED_LARGE),
            make_run(color_size_schema, BLUE_SMALL),
        ]
        entries = match_rules(runs, color_size_schema, include_unmatched=True)
        assert entries == [
            ("color=red  ==>  size=large ", 1),
            ("color=blue  ==>  size=small ", 0),
        ]

    @pytest.mark.parametrize("m", [1, 2, 3, 4, 6])
    def test_votes_grow_with_pairs(self, color_size_schema, m) -> None:
        """A rule shared by m runs gets m * (m - 1) / 2 votes."""
        runs = [make_run(color_size_schema, RED_LARGE) for _ in range(m)]
        matches = count_rule_matches(runs, color_size_schema)

        expected = m * (m - 1) // 2
        if expected:
            assert matches == {"color=red  ==>  size=large ": expected}
        else:
            assert matches == {}

    def test_same_antecedent_different_consequent_does_not_match(self, color_size_schema) -> None:
        runs = [
            make_run(color_size_schema, ({'color': 'red'}, {'size': 'large'})),
            make_run(color_size_schema, ({'color': 'red'}, {'size': 'small'})),
        ]
        assert match_rules(runs, color_size_schema) == []

    def test_match_is_independent_of_rule_position(self, color_size_schema) -> None:
        runs = [
            make_run(color_size_schema, BLUE_SMALL, RED_LARGE),
            make_run(color_size_schema, RED_LARGE, BLUE_SMALL),
        ]
        assert match_rules(runs, color_size_schema) == [
            ("color=blue  ==>  size=small ", 1),
            ("color=red  ==>  size=large ", 1),
        ]

    def test_no_runs(self, color_size_schema) -> None:
        assert match_rules([], color_size_schema) == []

    def test_class_mode_rendering(self, color_size_schema) -> None:
        schema = color_size_schema.with_class_index(1)
        runs = [make_run(schema, RED_LARGE), make_run(schema, RED_LARGE)]
        assert match_rules(runs, schema) == [("color=red  ==>  size=large ", 1)]


class TestRanking:
    def test_sorted_by_descending_count_then_rule(self) -> None:
        ranked = rank_matches({'b': 2, 'c': 5, 'a': 2, 'd': 1})
        assert ranked == [ConsensusEntry('c', 5), ConsensusEntry('a', 2),
                          ConsensusEntry('b', 2), ConsensusEntry('d', 1)]

    def test_order_of_runs_does_not_change_result(self, color_size_schema) -> None:
        runs = (
            [make_run(color_size_schema, RED_LARGE, BLUE_SMALL) for _ in range(3)]
            + [make_run(color_size_schema, RED_LARGE) for _ in range(2)]
            + [make_run(color_size_schema, BLUE_SMALL)]
        )
        expected = match_rules(runs, color_size_schema)

        rng = random.Random(7)
        for _ in range(5):
            shuffled = list(runs)
            rng.shuffle(shuffled)
            assert match_rules(shuffled, color_size_schema) == expected

        assert expected == [
            ("color=red  ==>  size=large ", 10),
            ("color=blue  ==>  size=small ", 6),
        ]
