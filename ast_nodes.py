"""AST node definitions for the scripting language.

This module defines the concrete AST node dataclasses produced by the parser.
Each node is a frozen dataclass carrying the relevant information (an
operator, child nodes, names, literal values). The `NodeType` enum identifies
node kinds and is used by the pretty-printer, the JSON dump and the
visualizer.

Conventions:
- All AST node dataclasses inherit from `ASTNode`, which records the node
    kind (`NodeType`, a class attribute) and the source `line`/`column` of the
    token that starts the construct; operator expressions and calls use the
    position of their operator or opening parenthesis. Positions are
    keyword-only and are not part of equality, so
    `NumberLiteral(2.0) == NumberLiteral(2.0, line=3)`.
- Nodes are immutable and sequences of children are tuples; a parsed tree
    never shares a node between two parents.
- Literal and expression nodes vs statement/declaration nodes are separated
    by purpose but are plain dataclasses so consumers can pattern-match on
    the class or on `node.type`.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar, Optional, Tuple


class NodeType(Enum):
    NUMBER_LITERAL = auto()
    STRING_LITERAL = auto()
    BOOLEAN_LITERAL = auto()
    NULL_LITERAL = auto()
    THIS_EXPRESSION = auto()
    IDENTIFIER = auto()
    UNARY_EXPRESSION = auto()
    CALL_EXPRESSION = auto()
    BINARY_EXPRESSION = auto()
    LOGICAL_EXPRESSION = auto()
    ASSIGNMENT_EXPRESSION = auto()
    TERNARY_EXPRESSION = auto()
    EXPRESSION_STATEMENT = auto()
    VARIABLE_DECLARATION = auto()
    FUNCTION_DECLARATION = auto()
    BLOCK_STATEMENT = auto()
    IF_STATEMENT = auto()
    WHILE_STATEMENT = auto()
    RETURN_STATEMENT = auto()
    PROGRAM = auto()

    def __str__(self) -> str:
        return self.name


# Base AST Node
@dataclass(frozen=True, kw_only=True)
class ASTNode:
    type: ClassVar[NodeType]
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


# Expression Nodes
@dataclass(frozen=True)
class NumberLiteral(ASTNode):
    type: ClassVar[NodeType] = NodeType.NUMBER_LITERAL
    value: float


@dataclass(frozen=True)
class StringLiteral(ASTNode):
    type: ClassVar[NodeType] = NodeType.STRING_LITERAL
    value: str


@dataclass(frozen=True)
class BooleanLiteral(ASTNode):
    type: ClassVar[NodeType] = NodeType.BOOLEAN_LITERAL
    value: bool


@dataclass(frozen=True)
class NullLiteral(ASTNode):
    type: ClassVar[NodeType] = NodeType.NULL_LITERAL


@dataclass(frozen=True)
class ThisExpression(ASTNode):
    type: ClassVar[NodeType] = NodeType.THIS_EXPRESSION


@dataclass(frozen=True)
class Identifier(ASTNode):
    type: ClassVar[NodeType] = NodeType.IDENTIFIER
    name: str


@dataclass(frozen=True)
class UnaryExpression(ASTNode):
    type: ClassVar[NodeType] = NodeType.UNARY_EXPRESSION
    operator: str
    argument: ASTNode


@dataclass(frozen=True)
class CallExpression(ASTNode):
    type: ClassVar[NodeType] = NodeType.CALL_EXPRESSION
    callee: ASTNode
    arguments: Tuple[ASTNode, ...] = ()


@dataclass(frozen=True)
class BinaryExpression(ASTNode):
    type: ClassVar[NodeType] = NodeType.BINARY_EXPRESSION
    operator: str
    left: ASTNode
    right: ASTNode


# `&&` and `||`; kept apart from BinaryExpression because evaluation
# short-circuits.
@dataclass(frozen=True)
class LogicalExpression(ASTNode):
    type: ClassVar[NodeType] = NodeType.LOGICAL_EXPRESSION
    operator: str
    left: ASTNode
    right: ASTNode


@dataclass(frozen=True)
class AssignmentExpression(ASTNode):
    type: ClassVar[NodeType] = NodeType.ASSIGNMENT_EXPRESSION
    operator: str
    left: ASTNode
    right: ASTNode


@dataclass(frozen=True)
class TernaryExpression(ASTNode):
    type: ClassVar[NodeType] = NodeType.TERNARY_EXPRESSION
    condition: ASTNode
    then_branch: ASTNode
    else_branch: ASTNode


# Statement Nodes
@dataclass(frozen=True)
class ExpressionStatement(ASTNode):
    type: ClassVar[NodeType] = NodeType.EXPRESSION_STATEMENT
    expression: ASTNode


@dataclass(frozen=True)
class BlockStatement(ASTNode):
    type: ClassVar[NodeType] = NodeType.BLOCK_STATEMENT
    body: Tuple[ASTNode, ...] = ()


@dataclass(frozen=True)
class IfStatement(ASTNode):
    type: ClassVar[NodeType] = NodeType.IF_STATEMENT
    condition: ASTNode
    then_branch: ASTNode
    else_branch: Optional[ASTNode] = None


@dataclass(frozen=True)
class WhileStatement(ASTNode):
    type: ClassVar[NodeType] = NodeType.WHILE_STATEMENT
    condition: ASTNode
    body: ASTNode


@dataclass(frozen=True)
class ReturnStatement(ASTNode):
    type: ClassVar[NodeType] = NodeType.RETURN_STATEMENT
    value: Optional[ASTNode] = None


# Declaration Nodes
@dataclass(frozen=True)
class VariableDeclaration(ASTNode):
    type: ClassVar[NodeType] = NodeType.VARIABLE_DECLARATION
    id: Identifier
    init: Optional[ASTNode] = None


@dataclass(frozen=True)
class FunctionDeclaration(ASTNode):
    type: ClassVar[NodeType] = NodeType.FUNCTION_DECLARATION
    id: Identifier
    params: Tuple[Identifier, ...]
    body: BlockStatement


# Program Node
@dataclass(frozen=True)
class Program(ASTNode):
    type: ClassVar[NodeType] = NodeType.PROGRAM
    body: Tuple[ASTNode, ...] = ()
