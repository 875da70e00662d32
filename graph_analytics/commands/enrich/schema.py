"""Resolve a query's selections against an SDL schema into a field-usage map.

The SDL is parsed once into a TypeTable (type name -> field name -> named
return type). The selected operation is then walked from its root type:
every nested field is recorded under the type it was selected on, and the
walk descends into the field's return type. Fields selected directly on the
operation root are entry points and are not recorded.

Resolution is best-effort telemetry. Gaps (unknown types or fields,
unparseable documents) become SchemaResolutionWarning entries; the
ResolutionPolicy decides whether a gap is skipped or fails the conversion.
"""

from __future__ import annotations

import logging
from typing import cast

from graphql.error import GraphQLSyntaxError
from graphql.language.ast import (
    DocumentNode,
    EnumTypeDefinitionNode,
    EnumTypeExtensionNode,
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    InlineFragmentNode,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ListTypeNode,
    NamedTypeNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    OperationDefinitionNode,
    ScalarTypeDefinitionNode,
    ScalarTypeExtensionNode,
    SchemaDefinitionNode,
    SchemaExtensionNode,
    SelectionSetNode,
    TypeNode,
    UnionTypeDefinitionNode,
    UnionTypeExtensionNode,
)

from graph_analytics.commands.enrich.graphql_utils import parse_document
from graph_analytics.commands.enrich.types import (
    FieldUsage,
    SchemaResolutionWarning,
    TypeTable,
)
from graph_analytics.config import ResolutionPolicy
from graph_analytics.errors import SchemaResolutionError

logger = logging.getLogger(__name__)

BUILTIN_SCALARS = frozenset({"String", "Int", "Float", "Boolean", "ID"})

# Types whose values have no fields to select.
LEAF_KINDS = frozenset({"scalar", "enum", "input"})

_TYPE_KINDS: tuple[tuple[tuple[type, ...], str], ...] = (
    ((ObjectTypeDefinitionNode, ObjectTypeExtensionNode), "object"),
    ((InterfaceTypeDefinitionNode, InterfaceTypeExtensionNode), "interface"),
    ((InputObjectTypeDefinitionNode, InputObjectTypeExtensionNode), "input"),
    ((UnionTypeDefinitionNode, UnionTypeExtensionNode), "union"),
    ((ScalarTypeDefinitionNode, ScalarTypeExtensionNode), "scalar"),
    ((EnumTypeDefinitionNode, EnumTypeExtensionNode), "enum"),
)


def build_type_table(sdl: str) -> TypeTable:
    """Index an SDL document by type name.

    Raises GraphQLSyntaxError when the SDL cannot be parsed, and
    RecursionError when it nests deeper than the parser can follow.
    """
    document = parse_document(sdl)
    table = TypeTable()
    for defn in document.definitions:
        if isinstance(defn, (SchemaDefinitionNode, SchemaExtensionNode)):
            for op_type in defn.operation_types or ():
                table.roots[op_type.operation.value] = op_type.type.name.value
            continue

        kind = _kind_of(defn)
        if kind is None:
            continue
        type_def = table.get_or_create(defn.name.value, kind)  # type: ignore[attr-defined]
        for field_node in getattr(defn, "fields", None) or ():
            type_def.fields[field_node.name.value] = named_type(field_node.type)
    return table


def named_type(node: TypeNode) -> str:
    """Strip list and non-null wrappers: ``[Character!]!`` -> ``Character``."""
    while isinstance(node, (ListTypeNode, NonNullTypeNode)):
        node = node.type
    return cast(NamedTypeNode, node).name.value


def collect_field_usage(
    sdl: str,
    query: str,
    operation_name: str | None = None,
    policy: ResolutionPolicy = ResolutionPolicy.LENIENT,
) -> FieldUsage:
    """Build the type -> field names map for ``query`` against ``sdl``.

    An empty schema means no schema is known for the API: the map is
    empty and no gap is reported.
    """
    walker = _UsageWalker(policy)
    if not sdl.strip():
        return walker.usage

    try:
        walker.table = build_type_table(sdl)
    except (GraphQLSyntaxError, RecursionError) as e:
        walker.report(SchemaResolutionWarning(reason=f"unparseable schema: {_describe(e)}"))
        return walker.usage

    try:
        document = parse_document(query)
    except (GraphQLSyntaxError, RecursionError) as e:
        walker.report(SchemaResolutionWarning(reason=f"unparseable query: {_describe(e)}"))
        return walker.usage

    try:
        walker.walk_document(document, operation_name)
    except RecursionError:
        walker.report(SchemaResolutionWarning(reason="selections nest too deep to walk"))
    return walker.usage


def _describe(error: Exception) -> str:
    if isinstance(error, GraphQLSyntaxError):
        return error.message
    return "nesting too deep"


def _kind_of(defn: object) -> str | None:
    for node_types, kind in _TYPE_KINDS:
        if isinstance(defn, node_types):
            return kind
    return None


class _UsageWalker:
    """Recursive walk over a query's selection sets using a TypeTable."""

    def __init__(self, policy: ResolutionPolicy):
        self.policy = policy
        self.table = TypeTable()
        self.usage = FieldUsage()
        self.fragments: dict[str, FragmentDefinitionNode] = {}

    def report(self, warning: SchemaResolutionWarning) -> None:
        """Record a resolution gap; the only place the policy is applied."""
        if self.policy == ResolutionPolicy.STRICT:
            raise SchemaResolutionError(
                f"schema resolution failed: {warning}",
                stage="schema",
                details={"type": warning.type_name, "field": warning.field_name},
            )
        logger.debug("Skipping unresolved selection: %s", warning)
        self.usage.warnings.append(warning)

    def walk_document(self, document: DocumentNode, operation_name: str | None) -> None:
        operations: list[OperationDefinitionNode] = []
        for defn in document.definitions:
            if isinstance(defn, FragmentDefinitionNode):
                self.fragments[defn.name.value] = defn
            elif isinstance(defn, OperationDefinitionNode):
                operations.append(defn)

        if not operations:
            self.report(SchemaResolutionWarning(reason="document has no operation"))
            return

        operation = operations[0]
        if operation_name:
            for op in operations:
                if op.name and op.name.value == operation_name:
                    operation = op
                    break

        root = self.table.roots.get(operation.operation.value, "Query")
        self._walk(operation.selection_set, root, is_root=True, spread=frozenset())

    def _walk(
        self,
        selection_set: SelectionSetNode | None,
        parent: str,
        is_root: bool,
        spread: frozenset[str],
    ) -> None:
        if not selection_set:
            return
        for selection in selection_set.selections:
            if isinstance(selection, FieldNode):
                self._walk_field(selection, parent, is_root, spread)
            elif isinstance(selection, InlineFragmentNode):
                target = (
                    selection.type_condition.name.value
                    if selection.type_condition
                    else parent
                )
                self._walk(
                    selection.selection_set, target, is_root and target == parent, spread
                )
            elif isinstance(selection, FragmentSpreadNode):
                frag_name = selection.name.value
                if frag_name in spread:
                    continue
                frag_def = self.fragments.get(frag_name)
                if frag_def is None:
                    self.report(
                        SchemaResolutionWarning(reason=f"unknown fragment {frag_name}")
                    )
                    continue
                target = frag_def.type_condition.name.value
                self._walk(
                    frag_def.selection_set,
                    target,
                    is_root and target == parent,
                    spread | {frag_name},
                )

    def _walk_field(
        self,
        node: FieldNode,
        parent: str,
        is_root: bool,
        spread: frozenset[str],
    ) -> None:
        name = node.name.value
        if name.startswith("__"):
            return

        if parent not in self.table.types:
            self.report(
                SchemaResolutionWarning(
                    reason="unknown parent type", type_name=parent, field_name=name
                )
            )
            return

        if not is_root:
            self.usage.add(parent, name)

        return_type = self.table.field_type(parent, name)
        if return_type is None:
            self.report(
                SchemaResolutionWarning(
                    reason="unknown field", type_name=parent, field_name=name
                )
            )
            return

        if node.selection_set is None:
            return
        return_def = self.table.types.get(return_type)
        if return_def is None:
            if return_type not in BUILTIN_SCALARS:
                self.report(
                    SchemaResolutionWarning(
                        reason=f"unknown return type {return_type}",
                        type_name=parent,
                        field_name=name,
                    )
                )
            return
        if return_def.kind in LEAF_KINDS:
            self.report(
                SchemaResolutionWarning(
                    reason=f"selection on {return_def.kind} type {return_type}",
                    type_name=parent,
                    field_name=name,
                )
            )
            return
        self._walk(node.selection_set, return_type, is_root=False, spread=spread)
