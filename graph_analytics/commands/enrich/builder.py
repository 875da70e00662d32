"""Convert tagged AnalyticsRecords into GraphRecords.

For each record:
1. Check the GraphQL tag
2. Decode the raw request and response and take their bodies
3. Interpret the JSON bodies; a request without a query string is fatal
4. Classify the operation and walk the query against the API schema
5. Re-encode the request variables, when present
6. Extract the response errors

Conversion is all-or-nothing: any fatal stage raises an ExtractionError
and no partial record is returned.
"""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Iterable
from typing import Any

from graph_analytics.commands.enrich.body import parse_request_body, parse_response_body
from graph_analytics.commands.enrich.operation import classify_operation
from graph_analytics.commands.enrich.response import extract_errors
from graph_analytics.commands.enrich.schema import collect_field_usage
from graph_analytics.commands.enrich.types import EnrichmentReport, FailedRecord
from graph_analytics.config import DEFAULT_CONFIG, ExtractorConfig
from graph_analytics.errors import ExtractionError, NotGraphQLError
from graph_analytics.formats.analytics_record import AnalyticsRecord, GraphRecord
from graph_analytics.helpers.http import decode_base64, read_message_body

logger = logging.getLogger(__name__)


def to_graph_record(
    record: AnalyticsRecord,
    config: ExtractorConfig = DEFAULT_CONFIG,
) -> GraphRecord:
    """Derive the GraphRecord for one captured exchange."""
    if not record.is_graph_record():
        raise NotGraphQLError("record is not tagged as a GraphQL call", stage="tags")

    request_body = read_message_body(record.raw_request, "raw request", stage="request")
    response_body = read_message_body(record.raw_response, "raw response", stage="response")

    request = parse_request_body(request_body)
    response = parse_response_body(response_body)
    if request.query is None or not request.query.strip():
        raise NotGraphQLError("request body has no query string", stage="request")

    operation_type = classify_operation(request.query, request.operation_name)
    if not operation_type:
        raise NotGraphQLError(
            "query text does not start a GraphQL operation",
            stage="operation",
            details={"query": request.query[:200]},
        )

    sdl = decode_base64(record.api_schema, "api schema", stage="schema").decode(
        "utf-8", errors="replace"
    )
    usage = collect_field_usage(
        sdl, request.query, request.operation_name, config.resolution
    )

    variables = ""
    if request.has_variables:
        variables = encode_variables(request.variables)

    has_errors, errors = extract_errors(response)

    return GraphRecord(
        **dict(record),
        operation_type=operation_type,
        types=usage.types,
        variables=variables,
        has_errors=has_errors,
        errors=errors,
    )


def encode_variables(variables: Any) -> str:
    """Base64 of the canonical (sorted, compact) JSON text of ``variables``."""
    text = json.dumps(variables, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def enrich_records(
    records: Iterable[AnalyticsRecord],
    config: ExtractorConfig = DEFAULT_CONFIG,
) -> EnrichmentReport:
    """Convert every tagged record; untagged ones are skipped, failures collected."""
    report = EnrichmentReport()
    for index, record in enumerate(records):
        if not record.is_graph_record():
            report.skipped += 1
            continue
        try:
            report.records.append(to_graph_record(record, config))
        except ExtractionError as e:
            logger.warning("Record %d failed at stage %s: %s", index, e.stage, e)
            report.failures.append(FailedRecord(index=index, stage=e.stage, message=str(e)))
    return report
