"""
Parser for arithmetic expressions such as `2 * x^2 - sqrt(y + 1) / 3`.

Precedence, from loosest to tightest: sums and differences, products and
divisions, negation, exponents (right associative), atoms.
"""

from __future__ import annotations

from typing import Dict, List, Type, Union

from .syntax_tree import Parser, ParseError, ParserContext, SyntaxTreeNode
from .tokens import Token, TokenCursor, compile_token_patterns, tokenize


_TOKEN_PATTERNS = compile_token_patterns([
    ("WHITESPACE", r"\s+"),
    ("NUMBER", r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"),
    ("IDENTIFIER", r"[A-Za-z_][A-Za-z_0-9]*"),
    ("OPERATOR", r"[-+*/^]"),
    ("PUNCTUATION", r"[(),]"),
])


class MathSyntaxTreeNode(SyntaxTreeNode):
    """Base class of math expression nodes."""


class NumberNode(MathSyntaxTreeNode):
    type = "Number"

    def __init__(self, token: Token, context: ParserContext):
        super().__init__(token, context, token.start, token.end)
        try:
            self.value: Union[int, float] = float(token.value) if any(c in token.value for c in ".eE") else int(token.value)
        except ValueError as e:
            raise ParseError(f"Invalid number {token.value[:40]}: {e}", token.start) from e


class VariableNode(MathSyntaxTreeNode):
    type = "Variable"

    def __init__(self, token: Token, context: ParserContext):
        super().__init__(token, context, token.start, token.end)
        self.name = token.value


class BinaryOperationNode(MathSyntaxTreeNode):
    """Base class of the two-operand operations."""

    def __init__(self, left_operand: MathSyntaxTreeNode, right_operand: MathSyntaxTreeNode, operator: Token, context: ParserContext):
        super().__init__(operator, context, left_operand.start_offset, right_operand.end_offset)
        self.left_operand = left_operand
        self.right_operand = right_operand

    @property
    def child_nodes(self) -> List[SyntaxTreeNode]:
        return [self.left_operand, self.right_operand]


class SumNode(BinaryOperationNode):
    type = "Sum"


class DifferenceNode(BinaryOperationNode):
    type = "Difference"


class MultiplicationNode(BinaryOperationNode):
    type = "Multiplication"


class DivisionNode(BinaryOperationNode):
    type = "Division"


class ExponentNode(BinaryOperationNode):
    type = "Exponent"


class NegationNode(MathSyntaxTreeNode):
    type = "Negation"

    def __init__(self, operand: MathSyntaxTreeNode, operator: Token, context: ParserContext):
        super().__init__(operator, context, operator.start, operand.end_offset)
        self.operand = operand

    @property
    def child_nodes(self) -> List[SyntaxTreeNode]:
        return [self.operand]


class ParenthesisNode(MathSyntaxTreeNode):
    type = "Parenthesis"

    def __init__(self, expression: MathSyntaxTreeNode, open_token: Token, close_token: Token, context: ParserContext):
        super().__init__((open_token, close_token), context, open_token.start, close_token.end)
        self.expression = expression

    @property
    def child_nodes(self) -> List[SyntaxTreeNode]:
        return [self.expression]


class FunctionCallNode(MathSyntaxTreeNode):
    type = "FunctionCall"

    def __init__(self, name: VariableNode, arguments: List[MathSyntaxTreeNode], close_token: Token, context: ParserContext):
        super().__init__(close_token, context, name.start_offset, close_token.end)
        self.name = name
        self.arguments = arguments

    @property
    def child_nodes(self) -> List[SyntaxTreeNode]:
        return [self.name, *self.arguments]


_BINARY_OPERATIONS: Dict[str, Type[BinaryOperationNode]] = {
    "+": SumNode,
    "-": DifferenceNode,
    "*": MultiplicationNode,
    "/": DivisionNode,
    "^": ExponentNode,
}


class _MathParser:
    """Recursive descent parser over expression tokens."""

    def __init__(self, tokens: List[Token], context: ParserContext):
        self._cursor = TokenCursor(tokens)
        self._context = context

    def parse_document(self) -> MathSyntaxTreeNode:
        expression = self._parse_expression()
        if not self._cursor.at_end:
            token = self._cursor.peek()
            raise ParseError(f"Unexpected {token.value!r}", token.start)
        return expression

    def _binary(self, left: MathSyntaxTreeNode, operator: Token, right: MathSyntaxTreeNode) -> BinaryOperationNode:
        return _BINARY_OPERATIONS[operator.value](left, right, operator, self._context)

    def _parse_expression(self) -> MathSyntaxTreeNode:
        node = self._parse_term()
        while True:
            operator = self._cursor.accept("OPERATOR", "+") or self._cursor.accept("OPERATOR", "-")
            if operator is None:
                return node
            node = self._binary(node, operator, self._parse_term())

    def _parse_term(self) -> MathSyntaxTreeNode:
        node = self._parse_unary()
        while True:
            operator = self._cursor.accept("OPERATOR", "*") or self._cursor.accept("OPERATOR", "/")
            if operator is None:
                return node
            node = self._binary(node, operator, self._parse_unary())

    def _parse_unary(self) -> MathSyntaxTreeNode:
        operator = self._cursor.accept("OPERATOR", "-")
        if operator is not None:
            return NegationNode(self._parse_unary(), operator, self._context)
        return self._parse_power()

    def _parse_power(self) -> MathSyntaxTreeNode:
        base = self._parse_atom()
        operator = self._cursor.accept("OPERATOR", "^")
        if operator is None:
            return base
        return self._binary(base, operator, self._parse_unary())

    def _parse_atom(self) -> MathSyntaxTreeNode:
        token = self._cursor.peek()
        if token.kind == "NUMBER":
            return NumberNode(self._cursor.advance(), self._context)

        if token.kind == "IDENTIFIER":
            name = VariableNode(self._cursor.advance(), self._context)
            if self._cursor.accept("PUNCTUATION", "(") is None:
                return name
            arguments: List[MathSyntaxTreeNode] = []
            close_token = self._cursor.accept("PUNCTUATION", ")")
            while close_token is None:
                arguments.append(self._parse_expression())
                close_token = self._cursor.accept("PUNCTUATION", ")")
                if close_token is None:
                    self._cursor.expect("PUNCTUATION", ",")
            return FunctionCallNode(name, arguments, close_token, self._context)

        open_token = self._cursor.accept("PUNCTUATION", "(")
        if open_token is not None:
            expression = self._parse_expression()
            close_token = self._cursor.expect("PUNCTUATION", ")")
            return ParenthesisNode(expression, open_token, close_token, self._context)

        raise ParseError(f"Expected a number, a variable or '(', got {token.kind} ({token.value!r})", token.start)


class MathParser(Parser):
    language_id = "math"

    def _parse(self, context: ParserContext) -> SyntaxTreeNode:
        tokens = tokenize(context.text, _TOKEN_PATTERNS)
        return _MathParser(tokens, context).parse_document()
