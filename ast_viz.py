"""Graphviz visualization helpers for ASTs.

Provides `render_ast_dot(node)` which returns a `graphviz.Digraph` object
(not rendered). Optionally `write_and_render` can write the file to disk.

Node layout: each AST node is rendered as an HTML-like table node with the
node kind in bold and its scalar fields (operator, name, literal value) and
source position underneath. Edges to children are labelled with the field
they come from (`left`, `arg[0]`, `body[2]`, ...).
"""

from typing import Iterator, List, Tuple
import html
from graphviz import Digraph
from ast_nodes import *
from tokens import format_number


def _label_text(node: ASTNode) -> str:
    """Return the short detail shown under the node kind."""
    match node:
        case NumberLiteral(value=v):
            return format_number(v)
        case StringLiteral(value=v):
            return repr(v)
        case BooleanLiteral(value=v):
            return "true" if v else "false"
        case Identifier(name=n):
            return n
        case UnaryExpression(operator=op) | BinaryExpression(operator=op) | LogicalExpression(
            operator=op
        ) | AssignmentExpression(operator=op):
            return op
        case VariableDeclaration(id=ident) | FunctionDeclaration(id=ident):
            return ident.name
    return ""


def _children(node: ASTNode) -> Iterator[Tuple[str, ASTNode]]:
    """Yield `(edge label, child)` pairs in source order."""
    match node:
        case UnaryExpression(argument=arg):
            yield "argument", arg
        case BinaryExpression(left=l, right=r) | LogicalExpression(
            left=l, right=r
        ) | AssignmentExpression(left=l, right=r):
            yield "left", l
            yield "right", r
        case TernaryExpression(condition=c, then_branch=t, else_branch=e):
            yield "condition", c
            yield "then", t
            yield "else", e
        case CallExpression(callee=callee, arguments=args):
            yield "callee", callee
            for i, arg in enumerate(args):
                yield f"arg[{i}]", arg
        case ExpressionStatement(expression=expr):
            yield "expression", expr
        case VariableDeclaration(init=init):
            if init is not None:
                yield "init", init
        case FunctionDeclaration(params=params, body=body):
            for i, param in enumerate(params):
                yield f"param[{i}]", param
            yield "body", body
        case ReturnStatement(value=value):
            if value is not None:
                yield "value", value
        case IfStatement(condition=c, then_branch=t, else_branch=e):
            yield "condition", c
            yield "then", t
            if e is not None:
                yield "else", e
        case WhileStatement(condition=c, body=body):
            yield "condition", c
            yield "body", body
        case BlockStatement(body=stmts) | Program(body=stmts):
            for i, stmt in enumerate(stmts):
                yield f"body[{i}]", stmt


def _node_html(node: ASTNode) -> str:
    kind = html.escape(type(node).__name__)
    detail = html.escape(_label_text(node))
    rows = [f"<TR><TD><B>{kind}</B></TD></TR>"]
    if detail:
        rows.append(f'<TR><TD><FONT POINT-SIZE="10">{detail}</FONT></TD></TR>')
    if node.line:
        rows.append(
            f'<TR><TD><FONT POINT-SIZE="8">{node.line}:{node.column}</FONT></TD></TR>'
        )
    return f'<<TABLE BORDER="0" CELLBORDER="1" CELLSPACING="0">{"".join(rows)}</TABLE>>'


def render_ast_dot(node: ASTNode) -> Digraph:
    """Return a graphviz.Digraph for the given AST.

    The caller may call `dot.source` to inspect the dot text, or call
    `dot.render(filename, format=...)` to write files (requires Graphviz installed).
    """
    dot = Digraph(format="svg")
    dot.attr("graph", rankdir="TB")

    # Walk with an explicit stack so deep trees do not recurse.
    counter = 0
    stack: List[Tuple[ASTNode, str]] = [(node, "n0")]
    while stack:
        current, ident = stack.pop()
        dot.node(ident, label=_node_html(current), shape="plaintext")
        children = []
        for edge_label, child in _children(current):
            counter += 1
            child_id = f"n{counter}"
            dot.edge(ident, child_id, label=edge_label)
            children.append((child, child_id))
        stack.extend(reversed(children))

    return dot


def write_and_render(node: ASTNode, out_path: str, fmt: str = "svg") -> None:
    """Write and render the AST to the given path (without extension).

    Example: write_and_render(ast, 'out/ast', fmt='png') will create out/ast.png
    (requires Graphviz)."""
    dot = render_ast_dot(node)
    dot.format = fmt
    # Note: render will append extension automatically
    dot.render(out_path, cleanup=True)
