"""Tests for Accept-header parsing and representation selection."""

from __future__ import annotations

import logging
import random

import pytest

from directory.representations.negotiation import (
    MediaRange,
    MediaType,
    NotAcceptableError,
    Specificity,
    negotiate,
    parse_accept,
)

LIST_TYPES = (MediaType.JSON, MediaType.XML)
ABOUT_TYPES = (MediaType.TEXT, MediaType.HTML)


class TestParseAccept:
    def test_default_weight_is_one(self):
        assert parse_accept("application/json") == [MediaRange("application", "json", 1.0)]

    def test_weights_and_whitespace(self):
        ranges = parse_accept("application/json ; q=0.9 , application/xml")
        assert ranges == [MediaRange("application", "json", 0.9), MediaRange("application", "xml", 1.0)]

    def test_lowercases_media_types(self):
        assert parse_accept("Text/HTML") == [MediaRange("text", "html")]

    def test_bare_star_is_any(self):
        assert parse_accept("*") == [MediaRange("*", "*")]

    def test_other_parameters_ignored(self):
        assert parse_accept("text/html;level=1;q=0.5") == [MediaRange("text", "html", 0.5)]

    @pytest.mark.parametrize("header", ["json", "*/html", "text/", "text/html;q=abc", "text/html;q=1.5", "text/html;q=-1"])
    def test_malformed_entries_skipped(self, header):
        assert parse_accept(f"{header}, application/xml") == [MediaRange("application", "xml")]

    def test_empty_header(self):
        assert parse_accept("") == []
        assert parse_accept(None) == []


class TestMediaRange:
    def test_specificity(self):
        assert MediaRange("*", "*").specificity == Specificity.ANY
        assert MediaRange("text", "*").specificity == Specificity.TYPE
        assert MediaRange("text", "plain").specificity == Specificity.EXACT

    def test_matches(self):
        assert MediaRange("text", "*").matches("text/html")
        assert not MediaRange("text", "*").matches("application/json")
        assert MediaRange("*", "*").matches("application/xml")
        assert MediaRange("application", "json").matches("Application/JSON")


class TestNegotiate:
    def test_missing_header_uses_server_order(self):
        assert negotiate(None, LIST_TYPES) == MediaType.JSON
        assert negotiate("  ", ABOUT_TYPES) == MediaType.TEXT

    def test_single_exact_match(self):
        assert negotiate("application/xml", LIST_TYPES) == MediaType.XML

    def test_higher_client_weight_wins(self):
        assert negotiate("application/json;q=0.9, application/xml", LIST_TYPES) == MediaType.XML

    def test_equal_weights_fall_back_to_server_order(self):
        assert negotiate("application/xml, application/json", LIST_TYPES) == MediaType.JSON
        assert negotiate("application/json;q=1.0, application/xml;q=1.0", LIST_TYPES) == MediaType.JSON

    def test_weighted_about(self):
        assert negotiate("text/plain;q=0.9, text/html", ABOUT_TYPES) == MediaType.HTML

    def test_full_wildcard_uses_server_order(self):
        assert negotiate("*/*", LIST_TYPES) == MediaType.JSON

    def test_more_specific_range_sets_weight(self):
        assert negotiate("*/*;q=0.8, application/xml;q=0.1", LIST_TYPES) == MediaType.JSON
        assert negotiate("application/*;q=0.5, application/xml", LIST_TYPES) == MediaType.XML

    def test_exact_match_beats_wildcard_match_on_tie(self):
        assert negotiate("text/*, text/html", ABOUT_TYPES) == MediaType.HTML

    def test_type_wildcard_picks_one_of_the_candidates(self):
        for seed in range(20):
            assert negotiate("text/*", ABOUT_TYPES, rng=random.Random(seed)) in ABOUT_TYPES

    def test_type_wildcard_choice_is_not_fixed(self):
        picks = {negotiate("text/*", ABOUT_TYPES, rng=random.Random(seed)) for seed in range(50)}
        assert picks == set(ABOUT_TYPES)

    def test_type_wildcard_with_single_candidate(self):
        assert negotiate("application/*", (MediaType.JSON,)) == MediaType.JSON

    def test_zero_weight_excludes(self):
        assert negotiate("application/json;q=0, */*", LIST_TYPES) == MediaType.XML

    def test_no_overlap_raises(self):
        with pytest.raises(NotAcceptableError, match=r"application/json, application/xml") as exc_info:
            negotiate("text/html", LIST_TYPES)
        assert exc_info.value.offered == LIST_TYPES

    def test_only_zero_weights_raises(self):
        with pytest.raises(NotAcceptableError):
            negotiate("text/*;q=0", ABOUT_TYPES)

    def test_nothing_offered_raises(self):
        with pytest.raises(NotAcceptableError):
            negotiate("*/*", ())


class TestSelectionLogging:
    def test_logs_selected_media_type_by_value(self, caplog):
        with caplog.at_level(logging.DEBUG):
            negotiate("application/xml", LIST_TYPES)

        assert "representation selected" in caplog.text
        assert "'media_type': 'application/xml'" in caplog.text

    def test_logs_default_selection_without_header(self, caplog):
        with caplog.at_level(logging.DEBUG):
            negotiate(None, ABOUT_TYPES)

        assert "'media_type': 'text/plain'" in caplog.text
