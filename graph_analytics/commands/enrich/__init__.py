"""Enrichment stages turning tagged AnalyticsRecords into GraphRecords."""

from __future__ import annotations

from graph_analytics.commands.enrich.builder import (
    encode_variables as encode_variables,
    enrich_records as enrich_records,
    to_graph_record as to_graph_record,
)
from graph_analytics.commands.enrich.operation import (
    classify_operation as classify_operation,
)
from graph_analytics.commands.enrich.schema import (
    collect_field_usage as collect_field_usage,
)

__all__ = [
    "classify_operation",
    "collect_field_usage",
    "encode_variables",
    "enrich_records",
    "to_graph_record",
]
