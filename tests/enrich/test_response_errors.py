"""Tests for GraphQL response error extraction."""

from __future__ import annotations

from graph_analytics.commands.enrich.response import extract_errors
from graph_analytics.commands.enrich.types import GraphQLResponse
from graph_analytics.formats.analytics_record import GraphError


class TestExtractErrors:
    def test_no_errors_field(self):
        assert extract_errors(GraphQLResponse(data={"a": 1})) == (False, [])

    def test_empty_errors(self):
        assert extract_errors(GraphQLResponse(errors=[])) == (False, [])

    def test_errors_not_a_list(self):
        assert extract_errors(GraphQLResponse(errors={"message": "x"})) == (False, [])

    def test_message_and_mixed_path(self):
        has_errors, errors = extract_errors(
            GraphQLResponse(
                errors=[
                    {
                        "message": "Name for character with ID 1002 could not be fetched.",
                        "locations": [{"line": 6, "column": 7}],
                        "path": ["hero", "heroFriends", 1, "name"],
                    }
                ]
            )
        )
        assert has_errors is True
        assert errors == [
            GraphError(
                message="Name for character with ID 1002 could not be fetched.",
                path=["hero", "heroFriends", 1, "name"],
            )
        ]
        assert isinstance(errors[0].path[2], int)

    def test_one_entry_per_error_in_order(self):
        _, errors = extract_errors(
            GraphQLResponse(errors=[{"message": "first"}, {"message": "second", "path": ["a"]}])
        )
        assert [e.message for e in errors] == ["first", "second"]
        assert errors[0].path == []
        assert errors[1].path == ["a"]

    def test_missing_message(self):
        _, errors = extract_errors(GraphQLResponse(errors=[{"path": ["a", 0]}]))
        assert errors == [GraphError(message="", path=["a", 0])]

    def test_non_string_message(self):
        _, errors = extract_errors(GraphQLResponse(errors=[{"message": {"code": 1}}]))
        assert errors[0].message == '{"code": 1}'

    def test_numeric_string_segment_not_coerced(self):
        _, errors = extract_errors(GraphQLResponse(errors=[{"message": "m", "path": ["items", "0"]}]))
        assert errors[0].path == ["items", "0"]

    def test_integral_float_segment_becomes_int(self):
        _, errors = extract_errors(GraphQLResponse(errors=[{"message": "m", "path": ["items", 2.0]}]))
        assert errors[0].path == ["items", 2]
        assert isinstance(errors[0].path[1], int)

    def test_unsupported_segments_dropped(self):
        _, errors = extract_errors(
            GraphQLResponse(errors=[{"message": "m", "path": ["a", None, True, 1.5, {"x": 1}, 3]}])
        )
        assert errors[0].path == ["a", 3]

    def test_negative_index_dropped(self):
        _, errors = extract_errors(
            GraphQLResponse(errors=[{"message": "m", "path": ["a", -1, -2.0, 0]}])
        )
        assert errors[0].path == ["a", 0]

    def test_string_entry(self):
        _, errors = extract_errors(GraphQLResponse(errors=["plain failure"]))
        assert errors == [GraphError(message="plain failure")]

    def test_non_object_entry(self):
        has_errors, errors = extract_errors(GraphQLResponse(errors=[42]))
        assert has_errors is True
        assert errors == [GraphError()]

    def test_data_and_errors_together(self):
        has_errors, errors = extract_errors(
            GraphQLResponse(data={"hero": None}, errors=[{"message": "partial"}])
        )
        assert has_errors is True
        assert len(errors) == 1
