"""
TypeScript Language Plugin.

This plugin parses TypeScript, TSX and JavaScript with tree-sitter and
converts the tree into the engine's ``SourceFile``: a node arena in document
order, the ordered comments and the ordered code tokens.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import tree_sitter_typescript as tsts
import yaml
from tree_sitter import Language, Node, Parser

from commentguard.models.syntax import (
    CodeToken,
    CommentKind,
    CommentToken,
    NodeKind,
    SourceFile,
    SourceSpan,
    SyntaxNode,
)
from plugins.base import LanguagePlugin

logger = logging.getLogger(__name__)

NODE_KINDS: Dict[str, NodeKind] = {
    "if_statement": NodeKind.CONDITIONAL,
    "for_statement": NodeKind.FOR_LOOP,
    "for_in_statement": NodeKind.FOR_LOOP,
    "while_statement": NodeKind.WHILE_LOOP,
    "do_statement": NodeKind.DO_WHILE_LOOP,
    "switch_statement": NodeKind.SWITCH,
    "try_statement": NodeKind.TRY_BLOCK,
    "ternary_expression": NodeKind.TERNARY,
    "statement_block": NodeKind.BLOCK,
    "switch_case": NodeKind.SWITCH_CASE,
    "switch_default": NodeKind.SWITCH_CASE,
    "catch_clause": NodeKind.CATCH_CLAUSE,
    "finally_clause": NodeKind.FINALLY_CLAUSE,
    "program": NodeKind.PROGRAM,
    # Class, interface and object members
    "class_body": NodeKind.MEMBER_LIST,
    "interface_body": NodeKind.MEMBER_LIST,
    "object_type": NodeKind.MEMBER_LIST,
    "object": NodeKind.MEMBER_LIST,
    "public_field_definition": NodeKind.MEMBER,
    "field_definition": NodeKind.MEMBER,
    "method_definition": NodeKind.MEMBER,
    "property_signature": NodeKind.MEMBER,
    "method_signature": NodeKind.MEMBER,
    "pair": NodeKind.MEMBER,
}

# Wrappers whose children belong to the enclosing construct
TRANSPARENT_TYPES = frozenset({"else_clause", "switch_body"})

COMMENT_TYPES = frozenset({"comment", "html_comment"})

GRAMMARS = ("typescript", "tsx")


def _kind_for(node_type: str) -> NodeKind:
    kind = NODE_KINDS.get(node_type)
    if kind is not None:
        return kind
    if node_type.endswith("_statement") or node_type.endswith("_declaration"):
        return NodeKind.STATEMENT
    return NodeKind.OTHER


def _span(ts_node: Node) -> SourceSpan:
    return SourceSpan.from_points(
        ts_node.start_point[0] + 1,  # Convert to 1-indexed
        ts_node.start_point[1],
        ts_node.end_point[0] + 1,
        ts_node.end_point[1],
    )


def _comment_body(raw: str) -> Tuple[str, CommentKind]:
    if raw.startswith("//"):
        return raw[2:], CommentKind.LINE
    if raw.startswith("<!--"):
        return raw[4:-3] if raw.endswith("-->") else raw[4:], CommentKind.BLOCK
    body = raw[2:] if raw.startswith("/*") else raw
    if body.endswith("*/"):
        body = body[:-2]
    return body, CommentKind.BLOCK


def _real_children(ts_node: Optional[Node]) -> List[Node]:
    if ts_node is None:
        return []
    return [c for c in ts_node.named_children if c.type not in COMMENT_TYPES]


class _TreeConverter:
    """Flattens one tree-sitter tree into arena nodes, comments and tokens."""

    def __init__(self, content: bytes):
        self._content = content
        self._ts_nodes: List[Node] = []
        self._parents: List[Optional[int]] = []
        self._index_by_ts_id: Dict[int, int] = {}
        self.comments: List[CommentToken] = []
        self.tokens: List[CodeToken] = []

    def convert(self, root: Node) -> List[SyntaxNode]:
        self._collect(root)
        return [self._build(i) for i in range(len(self._ts_nodes))]

    def _collect(self, root: Node) -> None:
        # Pre-order walk; children pushed in reverse to keep document order
        stack: List[Tuple[Node, Optional[int]]] = [(root, None)]
        while stack:
            ts_node, parent_index = stack.pop()

            if ts_node.type in COMMENT_TYPES:
                self._add_comment(ts_node)
                continue

            if ts_node.child_count == 0:
                if ts_node.end_byte > ts_node.start_byte:
                    self.tokens.append(CodeToken(token_type=ts_node.type, span=_span(ts_node)))
                if not ts_node.is_named:
                    continue

            own_index = parent_index
            if ts_node.is_named and ts_node.type not in TRANSPARENT_TYPES:
                own_index = len(self._ts_nodes)
                self._ts_nodes.append(ts_node)
                self._parents.append(parent_index)
                self._index_by_ts_id[ts_node.id] = own_index

            for child in reversed(ts_node.children):
                stack.append((child, own_index))

    def _add_comment(self, ts_node: Node) -> None:
        raw = self._content[ts_node.start_byte:ts_node.end_byte].decode("utf-8", errors="replace")
        text, kind = _comment_body(raw)
        self.comments.append(CommentToken(text=text, kind=kind, span=_span(ts_node)))

    def _id_of(self, ts_node: Optional[Node]) -> Optional[int]:
        if ts_node is None:
            return None
        return self._index_by_ts_id.get(ts_node.id)

    def _build(self, index: int) -> SyntaxNode:
        ts_node = self._ts_nodes[index]
        node_type = ts_node.type
        roles: Dict[str, object] = {}

        if node_type == "if_statement":
            roles["consequent_id"] = self._id_of(ts_node.child_by_field_name("consequence"))
            else_clause = ts_node.child_by_field_name("alternative")
            branches = _real_children(else_clause)
            roles["alternate_id"] = self._id_of(branches[-1]) if branches else None
        elif node_type == "ternary_expression":
            roles["consequent_id"] = self._id_of(ts_node.child_by_field_name("consequence"))
            roles["alternate_id"] = self._id_of(ts_node.child_by_field_name("alternative"))
        elif node_type in ("for_statement", "for_in_statement", "while_statement", "do_statement",
                           "catch_clause", "finally_clause"):
            roles["body_id"] = self._id_of(ts_node.child_by_field_name("body"))
        elif node_type == "try_statement":
            roles["body_id"] = self._id_of(ts_node.child_by_field_name("body"))
            roles["handler_id"] = self._id_of(ts_node.child_by_field_name("handler"))
            roles["finalizer_id"] = self._id_of(ts_node.child_by_field_name("finalizer"))
        elif node_type == "switch_statement":
            cases = _real_children(ts_node.child_by_field_name("body"))
            roles["case_ids"] = [
                i for i in (self._id_of(c) for c in cases if c.type in ("switch_case", "switch_default"))
                if i is not None
            ]
        elif node_type in ("statement_block", "program"):
            roles["statement_ids"] = [
                i for i in (self._id_of(c) for c in _real_children(ts_node)) if i is not None
            ]

        return SyntaxNode(
            node_id=index,
            kind=_kind_for(node_type),
            node_type=node_type,
            span=_span(ts_node),
            parent_id=self._parents[index],
            **roles,
        )


class TypeScriptPlugin(LanguagePlugin):
    """TypeScript/JavaScript language plugin using tree-sitter."""

    def __init__(self, config: Optional[Dict] = None, config_path: Optional[Path] = None):
        """
        Initialize the TypeScript plugin.

        Args:
            config: Already loaded plugin configuration
            config_path: Path to config.yaml, used when ``config`` is not given.
                If None, uses the bundled configuration.
        """
        if config is None:
            if config_path is None:
                config_path = Path(__file__).parent / "config.yaml"
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)

        self._config = config
        self._tsx_extensions = {ext.lower() for ext in config.get('tsx_extensions', ['.tsx'])}
        self._parsers: Dict[str, Parser] = {}

        logger.info("TypeScript plugin initialized successfully")

    @property
    def language_name(self) -> str:
        return "typescript"

    @property
    def file_extensions(self) -> List[str]:
        return self._config.get('file_extensions', ['.ts', '.tsx'])

    def grammar_for(self, file_path: str) -> str:
        """Grammar name ('typescript' or 'tsx') used for a file."""
        return "tsx" if Path(file_path).suffix.lower() in self._tsx_extensions else "typescript"

    def _get_parser(self, grammar: str) -> Parser:
        parser = self._parsers.get(grammar)
        if parser is None:
            if grammar == "tsx":
                language = Language(tsts.language_tsx())
            else:
                language = Language(tsts.language_typescript())
            parser = Parser(language)
            self._parsers[grammar] = parser
        return parser

    def parse_source(self, file_path: str, content: str) -> SourceFile:
        """
        Parse a TypeScript/JavaScript file with tree-sitter.

        Args:
            file_path: Path to the file being parsed
            content: File content as string

        Returns:
            SourceFile with the node arena, comments and code tokens

        Raises:
            ValueError: If the file cannot be parsed
        """
        try:
            data = content.encode("utf-8")
            tree = self._get_parser(self.grammar_for(file_path)).parse(data)

            if tree.root_node is None:
                raise ValueError(f"Failed to parse TypeScript file: {file_path}")
            if tree.root_node.has_error:
                logger.warning(f"Syntax errors in {file_path}; results may be incomplete")

            converter = _TreeConverter(data)
            nodes = converter.convert(tree.root_node)

            logger.debug(
                f"Parsed {file_path}: {len(nodes)} nodes, "
                f"{len(converter.comments)} comments, {len(converter.tokens)} tokens"
            )
            return SourceFile(
                file_path=file_path,
                language=self.language_name,
                lines=[line.rstrip("\r") for line in content.split("\n")],
                nodes=nodes,
                comments=converter.comments,
                tokens=converter.tokens,
            )

        except Exception as e:
            logger.error(f"Error parsing TypeScript file {file_path}: {e}")
            raise ValueError(f"Failed to parse TypeScript file: {e}")
