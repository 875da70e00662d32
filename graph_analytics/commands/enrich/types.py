"""Types passed between the enrichment stages.

Three layers of types:
1. Interpreted bodies: the GraphQL request and response of one exchange
2. Type table: the SDL schema indexed by type name, built once per record
3. Field usage: the type -> field names map produced by walking a query
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from graph_analytics.formats.analytics_record import GraphRecord

# -- Interpreted bodies ---------------------------------------------------------


@dataclass
class GraphQLRequest:
    """The JSON body of a GraphQL HTTP request."""

    query: str | None = None  # None when absent or not a string
    variables: Any = None
    has_variables: bool = False  # distinguishes an absent key from {} or null
    operation_name: str | None = None


@dataclass
class GraphQLResponse:
    """The JSON body of a GraphQL HTTP response."""

    data: Any = None
    errors: Any = None  # raw top-level "errors" value, None when absent


# -- Type table -----------------------------------------------------------------


@dataclass
class TypeDef:
    """A named schema type and the named return type of each of its fields."""

    name: str
    kind: str = "object"  # "object", "interface", "input", "union", "scalar", "enum"
    fields: dict[str, str] = field(default_factory=lambda: dict[str, str]())


@dataclass
class TypeTable:
    """Schema types keyed by name, plus the root type of each operation kind."""

    types: dict[str, TypeDef] = field(default_factory=lambda: dict[str, TypeDef]())
    roots: dict[str, str] = field(
        default_factory=lambda: {
            "query": "Query",
            "mutation": "Mutation",
            "subscription": "Subscription",
        }
    )

    def get_or_create(self, name: str, kind: str) -> TypeDef:
        """Get an existing type or create a new one (extensions may come first)."""
        if name not in self.types:
            self.types[name] = TypeDef(name=name, kind=kind)
        return self.types[name]

    def field_type(self, type_name: str, field_name: str) -> str | None:
        """Named return type of ``type_name.field_name``, None if unknown."""
        type_def = self.types.get(type_name)
        if type_def is None:
            return None
        return type_def.fields.get(field_name)


# -- Field usage ----------------------------------------------------------------


@dataclass
class SchemaResolutionWarning:
    """A selection that could not be resolved against the schema."""

    reason: str
    type_name: str | None = None
    field_name: str | None = None

    def __str__(self) -> str:
        if self.type_name and self.field_name:
            return f"{self.type_name}.{self.field_name}: {self.reason}"
        if self.type_name:
            return f"{self.type_name}: {self.reason}"
        return self.reason


@dataclass
class FieldUsage:
    """Field names selected per type, deduplicated in first-seen order."""

    types: dict[str, list[str]] = field(default_factory=lambda: dict[str, list[str]]())
    warnings: list[SchemaResolutionWarning] = field(
        default_factory=lambda: list[SchemaResolutionWarning]()
    )

    def add(self, type_name: str, field_name: str) -> None:
        names = self.types.setdefault(type_name, [])
        if field_name not in names:
            names.append(field_name)


# -- Batch output ---------------------------------------------------------------


@dataclass
class FailedRecord:
    index: int
    stage: str
    message: str


@dataclass
class EnrichmentReport:
    """Outcome of converting a batch of records."""

    records: list[GraphRecord] = field(default_factory=lambda: list[GraphRecord]())
    skipped: int = 0  # records without the GraphQL tag
    failures: list[FailedRecord] = field(default_factory=lambda: list[FailedRecord]())
