"""Pretty-printer for the AST.

Provides two renderings:

- `PrettyPrinter.print_ast(node, indent, prefix)` renders an AST into a
    readable multi-line tree dump. It is intended for debugging, tests and the
    command-line driver.
- `PrettyPrinter.print_source(node)` renders an AST back into source text.
    Every compound expression is parenthesized, so parsing the output yields
    an equal tree.

The tree dump and expression rendering walk the tree with an explicit stack,
as the parser builds long operator chains without recursing. Statement
rendering recurses, bounded by the parser's nesting limit.

Examples:
    PrettyPrinter.print_ast(program_node)
    PrettyPrinter.print_source(program_node)
"""

from __future__ import annotations
from typing import List, Tuple, Union
from ast_nodes import *
from tokens import format_number, quote_string


class PrettyPrinter:
    @staticmethod
    def _tree_entry(node: ASTNode) -> Tuple[str, List[Tuple[int, str, ASTNode]]]:
        """Return the dump header of `node` and its children as
        `(indent step, prefix, child)` triples."""
        match node:
            case NumberLiteral(value=v):
                return f"NumberLiteral({format_number(v)})", []

            case StringLiteral(value=v):
                return f"StringLiteral({v!r})", []

            case BooleanLiteral(value=v):
                return f"BooleanLiteral({'true' if v else 'false'})", []

            case NullLiteral():
                return "NullLiteral", []

            case ThisExpression():
                return "ThisExpression", []

            case Identifier(name=n):
                return f"Identifier({n})", []

            case UnaryExpression(operator=op, argument=arg):
                return f"UnaryExpression({op})", [(2, "argument: ", arg)]

            case BinaryExpression(operator=op, left=left, right=right) | LogicalExpression(
                operator=op, left=left, right=right
            ) | AssignmentExpression(operator=op, left=left, right=right):
                return f"{type(node).__name__}({op})", [
                    (2, "left: ", left),
                    (2, "right: ", right),
                ]

            case TernaryExpression(condition=cond, then_branch=then_b, else_branch=else_b):
                return "TernaryExpression", [
                    (4, "condition: ", cond),
                    (4, "then: ", then_b),
                    (4, "else: ", else_b),
                ]

            case CallExpression(callee=callee, arguments=args):
                children = [(4, "callee: ", callee)]
                children.extend((4, f"arg[{i}]: ", arg) for i, arg in enumerate(args))
                return "CallExpression", children

            case FunctionDeclaration(id=ident, params=params, body=body):
                names = ", ".join(p.name for p in params)
                return f"FunctionDeclaration({ident.name}, params=[{names}])", [
                    (4, "body: ", body)
                ]

            case VariableDeclaration(id=ident, init=None):
                return f"VariableDeclaration({ident.name})", []

            case VariableDeclaration(id=ident, init=init):
                return f"VariableDeclaration({ident.name} = ...)", [(2, "init: ", init)]

            case ReturnStatement(value=None):
                return "ReturnStatement", []

            case ReturnStatement(value=value):
                return "ReturnStatement", [(2, "value: ", value)]

            case ExpressionStatement(expression=expr):
                return "ExpressionStatement", [(2, "", expr)]

            case WhileStatement(condition=cond, body=body):
                return "WhileStatement", [(4, "condition: ", cond), (4, "body: ", body)]

            case IfStatement(condition=cond, then_branch=then_b, else_branch=else_b):
                children = [(4, "condition: ", cond), (4, "then: ", then_b)]
                if else_b is not None:
                    children.append((4, "else: ", else_b))
                return "IfStatement", children

            case BlockStatement(body=stmts) | Program(body=stmts):
                return type(node).__name__, [
                    (4, f"stmt[{i}]: ", stmt) for i, stmt in enumerate(stmts)
                ]

        return f"Unknown node type: {type(node)}", []

    @staticmethod
    def print_ast(node: ASTNode, indent: int = 0, prefix: str = "") -> str:
        """Pretty print AST and return as string."""
        if not isinstance(node, ASTNode):
            return f"{' ' * indent}{prefix}{node}"

        lines = []
        stack: List[Tuple[ASTNode, int, str]] = [(node, indent, prefix)]
        while stack:
            current, depth, label = stack.pop()
            header, children = PrettyPrinter._tree_entry(current)
            lines.append(f"{' ' * depth}{label}{header}")
            for step, child_prefix, child in reversed(children):
                stack.append((child, depth + step, child_prefix))

        return "\n".join(lines)

    @staticmethod
    def _expression_parts(node: ASTNode) -> List[Union[str, ASTNode]]:
        """Split an expression into literal text and sub-expressions, in order."""
        match node:
            case NumberLiteral(value=v):
                return [format_number(v)]
            case StringLiteral(value=v):
                return [quote_string(v)]
            case BooleanLiteral(value=v):
                return ["true" if v else "false"]
            case NullLiteral():
                return ["null"]
            case ThisExpression():
                return ["this"]
            case Identifier(name=n):
                return [n]
            case UnaryExpression(operator=op, argument=arg):
                return [f"({op}", arg, ")"]
            case BinaryExpression(operator=op, left=l, right=r) | LogicalExpression(
                operator=op, left=l, right=r
            ) | AssignmentExpression(operator=op, left=l, right=r):
                return ["(", l, f" {op} ", r, ")"]
            case TernaryExpression(condition=c, then_branch=t, else_branch=e):
                return ["(", c, " ? ", t, " : ", e, ")"]
            case CallExpression(callee=callee, arguments=args):
                parts: List[Union[str, ASTNode]] = [callee, "("]
                for i, arg in enumerate(args):
                    if i:
                        parts.append(", ")
                    parts.append(arg)
                parts.append(")")
                return parts
        raise TypeError(f"Not an expression node: {type(node).__name__}")

    @staticmethod
    def print_expression(node: ASTNode) -> str:
        """Render an expression as source text, parenthesizing compound forms."""
        if not isinstance(node, ASTNode):
            raise TypeError(f"Not an expression node: {type(node).__name__}")

        out: List[str] = []
        stack: List[Union[str, ASTNode]] = [node]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                out.append(item)
            else:
                stack.extend(reversed(PrettyPrinter._expression_parts(item)))
        return "".join(out)

    @staticmethod
    def print_source(node: ASTNode, indent: int = 0) -> str:
        """Render a statement, declaration or program as source text."""
        pad = "    " * indent
        lines: List[str] = []

        match node:
            case Program(body=stmts):
                return "\n".join(PrettyPrinter.print_source(s, indent) for s in stmts)

            case BlockStatement(body=stmts):
                lines.append(f"{pad}{{")
                lines.extend(PrettyPrinter.print_source(s, indent + 1) for s in stmts)
                lines.append(f"{pad}}}")

            case VariableDeclaration(id=ident, init=init):
                if init is None:
                    lines.append(f"{pad}var {ident.name};")
                else:
                    lines.append(f"{pad}var {ident.name} = {PrettyPrinter.print_expression(init)};")

            case FunctionDeclaration(id=ident, params=params, body=body):
                names = ", ".join(p.name for p in params)
                lines.append(f"{pad}function {ident.name}({names})")
                lines.append(PrettyPrinter.print_source(body, indent))

            case IfStatement(condition=cond, then_branch=then_b, else_branch=else_b):
                lines.append(f"{pad}if ({PrettyPrinter.print_expression(cond)})")
                lines.append(PrettyPrinter.print_source(then_b, indent + 1))
                if else_b is not None:
                    lines.append(f"{pad}else")
                    lines.append(PrettyPrinter.print_source(else_b, indent + 1))

            case WhileStatement(condition=cond, body=body):
                lines.append(f"{pad}while ({PrettyPrinter.print_expression(cond)})")
                lines.append(PrettyPrinter.print_source(body, indent + 1))

            case ReturnStatement(value=value):
                if value is None:
                    lines.append(f"{pad}return;")
                else:
                    lines.append(f"{pad}return {PrettyPrinter.print_expression(value)};")

            case ExpressionStatement(expression=expr):
                lines.append(f"{pad}{PrettyPrinter.print_expression(expr)};")

            case _:
                lines.append(f"{pad}{PrettyPrinter.print_expression(node)};")

        return "\n".join(lines)
