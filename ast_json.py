"""Convert AST nodes into JSON-serializable structures.

This module provides `ast_to_json(node)` which returns a nested structure
of dicts/lists/primitives describing the AST node. Every node is encoded as a
dict with a `node_type` key, its fields and its source position; child
sequences become lists.

The tree is walked with an explicit stack so operator chains of any length
convert without recursion.
"""

from typing import Any, Dict, List, Optional, Tuple
from ast_nodes import *


def _node_fields(node: ASTNode) -> List[Tuple[str, Any]]:
    """Return `(key, value)` pairs for `node`; child nodes are left unencoded."""
    match node:
        # literals
        case NumberLiteral(value=v) | StringLiteral(value=v) | BooleanLiteral(value=v):
            return [("value", v)]
        case NullLiteral() | ThisExpression():
            return []
        case Identifier(name=n):
            return [("name", n)]

        # expressions
        case UnaryExpression(operator=op, argument=arg):
            return [("operator", op), ("argument", arg)]
        case BinaryExpression() | LogicalExpression() | AssignmentExpression():
            return [("operator", node.operator), ("left", node.left), ("right", node.right)]
        case TernaryExpression(condition=cond, then_branch=then_b, else_branch=else_b):
            return [("condition", cond), ("then", then_b), ("else", else_b)]
        case CallExpression(callee=callee, arguments=args):
            return [("callee", callee), ("arguments", args)]

        # statements and higher-level nodes
        case ExpressionStatement(expression=expr):
            return [("expression", expr)]
        case VariableDeclaration(id=ident, init=init):
            return [("id", ident), ("init", init)]
        case FunctionDeclaration(id=ident, params=params, body=body):
            return [("id", ident), ("params", params), ("body", body)]
        case ReturnStatement(value=value):
            return [("value", value)]
        case IfStatement(condition=cond, then_branch=then_b, else_branch=else_b):
            return [("condition", cond), ("then", then_b), ("else", else_b)]
        case WhileStatement(condition=cond, body=body):
            return [("condition", cond), ("body", body)]
        case BlockStatement(body=stmts) | Program(body=stmts):
            return [("body", stmts)]

    raise TypeError(f"Cannot serialize {type(node).__name__}")


def ast_to_json(node: Optional[ASTNode]) -> Any:
    if node is None:
        return None

    root: Dict[str, Any] = {}
    # Each entry stores the encoding of `node` at `container[key]`; keys are
    # pre-filled so dicts keep field order regardless of visit order.
    stack: List[Tuple[Any, Any, Any]] = [(node, root, "node")]
    while stack:
        current, container, key = stack.pop()
        data: Dict[str, Any] = {"node_type": type(current).__name__}
        for name, value in _node_fields(current):
            if isinstance(value, ASTNode):
                data[name] = None
                stack.append((value, data, name))
            elif isinstance(value, tuple):
                items: List[Any] = [None] * len(value)
                data[name] = items
                stack.extend((child, items, i) for i, child in enumerate(value))
            else:
                data[name] = value
        data["line"] = current.line
        data["column"] = current.column
        container[key] = data

    return root["node"]
