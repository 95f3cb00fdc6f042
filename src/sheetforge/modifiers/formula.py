"""Arithmetic formula evaluation for modifier values.

Formulas are short expressions written by content authors, e.g.
``"level * 2"``, ``"proficiencyBonus"`` or ``"max(strMod, dexMod)"``. They are
evaluated against a flat mapping of variable names to numbers and always
produce an integer, since every derived value on a character sheet is a whole
number.

Supported grammar (lowest to highest precedence)::

    comparison  := additive (("<" | "<=" | ">" | ">=" | "==" | "!=") additive)*
    additive    := term (("+" | "-") term)*
    term        := unary (("*" | "/" | "%") unary)*
    unary       := ("+" | "-") unary | power
    power       := primary ("^" unary)?
    primary     := NUMBER | NAME | NAME "(" args ")" | "(" comparison ")"

Comparisons evaluate to ``1`` or ``0``. Parentheses and signs may nest at most
``MAX_NESTING`` deep.
"""

import math
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass

FormulaContext = Mapping[str, float]

MAX_NESTING = 64


class FormulaError(ValueError):
    """Raised when a formula cannot be parsed or evaluated."""

    pass


@dataclass(frozen=True)
class Token:
    """A lexical token of a formula."""

    kind: str  # "number", "name", "op", "lparen", "rparen", "comma", "end"
    text: str
    position: int


_TOKEN_PATTERN = re.compile(
    r"""
    (?P<space>\s+)
    |(?P<number>\d+(?:\.\d*)?|\.\d+)
    |(?P<name>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<op><=|>=|==|!=|[-+*/%^<>])
    |(?P<lparen>\()
    |(?P<rparen>\))
    |(?P<comma>,)
    """,
    re.VERBOSE,
)

_COMPARISONS: dict[str, Callable[[float, float], bool]] = {
    "<": lambda a, b: a < b,
    "<=": lambda a, b: a <= b,
    ">": lambda a, b: a > b,
    ">=": lambda a, b: a >= b,
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
}


def _variadic_min(*args: float) -> float:
    return min(args)


def _variadic_max(*args: float) -> float:
    return max(args)


# name -> (callable, exact arity or None for one-or-more)
FUNCTIONS: dict[str, tuple[Callable[..., float], int | None]] = {
    "min": (_variadic_min, None),
    "max": (_variadic_max, None),
    "floor": (math.floor, 1),
    "ceil": (math.ceil, 1),
    "round": (round, 1),
    "abs": (abs, 1),
}


def tokenize(formula: str) -> list[Token]:
    """Split a formula into tokens.

    Raises:
        FormulaError: On any character that does not start a valid token
    """
    tokens: list[Token] = []
    position = 0
    while position < len(formula):
        match = _TOKEN_PATTERN.match(formula, position)
        if match is None:
            raise FormulaError(
                f"Unexpected character {formula[position]!r} at position {position}"
            )
        kind = match.lastgroup
        if kind != "space":
            tokens.append(Token(kind=kind, text=match.group(), position=position))
        position = match.end()
    tokens.append(Token(kind="end", text="", position=len(formula)))
    return tokens


class _Parser:
    """Recursive-descent evaluator over a token list.

    Evaluation happens during parsing; there is no intermediate tree.
    """

    def __init__(self, tokens: list[Token], context: FormulaContext) -> None:
        self.tokens = tokens
        self.context = context
        self.index = 0
        self.depth = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def _expect(self, kind: str) -> Token:
        token = self.current
        if token.kind != kind:
            found = token.text or "end of formula"
            raise FormulaError(f"Expected {kind} but found {found!r} at position {token.position}")
        return self._advance()

    def parse(self) -> float:
        value = self._comparison()
        if self.current.kind != "end":
            raise FormulaError(
                f"Unexpected {self.current.text!r} at position {self.current.position}"
            )
        return value

    def _comparison(self) -> float:
        left = self._additive()
        while self.current.kind == "op" and self.current.text in _COMPARISONS:
            op = self._advance().text
            right = self._additive()
            left = 1.0 if _COMPARISONS[op](left, right) else 0.0
        return left

    def _additive(self) -> float:
        left = self._term()
        while self.current.kind == "op" and self.current.text in ("+", "-"):
            op = self._advance().text
            right = self._term()
            left = left + right if op == "+" else left - right
        return left

    def _term(self) -> float:
        left = self._unary()
        while self.current.kind == "op" and self.current.text in ("*", "/", "%"):
            op = self._advance().text
            right = self._unary()
            if op == "*":
                left = left * right
            elif right == 0:
                raise FormulaError("Division by zero")
            elif op == "/":
                left = left / right
            else:
                left = left % right
        return left

    def _unary(self) -> float:
        # every nested group and sign passes through here
        self.depth += 1
        if self.depth > MAX_NESTING:
            raise FormulaError(f"Formula nested deeper than {MAX_NESTING} levels")
        try:
            return self._signed()
        finally:
            self.depth -= 1

    def _signed(self) -> float:
        if self.current.kind == "op" and self.current.text in ("+", "-"):
            op = self._advance().text
            operand = self._unary()
            return -operand if op == "-" else operand
        return self._power()

    def _power(self) -> float:
        base = self._primary()
        if self.current.kind == "op" and self.current.text == "^":
            self._advance()
            exponent = self._unary()
            try:
                return math.pow(base, exponent)
            except (OverflowError, ValueError) as e:
                raise FormulaError(f"Invalid power {base}^{exponent}: {e}")
        return base

    def _primary(self) -> float:
        token = self.current

        if token.kind == "number":
            self._advance()
            return float(token.text)

        if token.kind == "lparen":
            self._advance()
            value = self._comparison()
            self._expect("rparen")
            return value

        if token.kind == "name":
            self._advance()
            if self.current.kind == "lparen":
                return self._call(token)
            if token.text not in self.context:
                raise FormulaError(f"Undefined variable {token.text!r}")
            return float(self.context[token.text])

        found = token.text or "end of formula"
        raise FormulaError(f"Unexpected {found!r} at position {token.position}")

    def _call(self, name: Token) -> float:
        if name.text not in FUNCTIONS:
            raise FormulaError(f"Unknown function {name.text!r}")
        func, arity = FUNCTIONS[name.text]

        self._expect("lparen")
        args: list[float] = []
        if self.current.kind != "rparen":
            args.append(self._comparison())
            while self.current.kind == "comma":
                self._advance()
                args.append(self._comparison())
        self._expect("rparen")

        if arity is None and not args:
            raise FormulaError(f"{name.text}() needs at least one argument")
        if arity is not None and len(args) != arity:
            raise FormulaError(f"{name.text}() takes {arity} argument(s), got {len(args)}")
        if not all(math.isfinite(arg) for arg in args):
            raise FormulaError(f"{name.text}() got a non-finite argument")
        return float(func(*args))


def evaluate_formula(formula: str, context: FormulaContext) -> int:
    """Evaluate a formula against a variable context.

    Args:
        formula: Expression text, e.g. ``"10 + dexMod"``
        context: Variable name to value mapping

    Returns:
        The result, floored to an integer

    Raises:
        FormulaError: If the formula is empty, malformed, references an
            undefined variable or function, or does not produce a finite number

    Examples:
        >>> evaluate_formula("level * 2", {"level": 5})
        10
        >>> evaluate_formula("max(strMod, dexMod)", {"strMod": 1, "dexMod": 3})
        3
        >>> evaluate_formula("7 / 2", {})
        3
    """
    if not formula or not formula.strip():
        raise FormulaError("Empty formula")

    result = _Parser(tokenize(formula), context).parse()
    if not math.isfinite(result):
        raise FormulaError(f"Formula {formula!r} did not produce a finite number")
    return math.floor(result)
