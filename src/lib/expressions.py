"""
Sandboxed evaluator for bound expressions

Evaluates the source of {...} attribute values and child containers. The
accepted language is a JavaScript literal subset:

- numbers (decimal, exponent, 0x/0o/0b), strings ('', "", `` without ${})
- true, false, null, undefined, NaN, Infinity
- object literals {a: 1, "b": [2], 3: 'c',} and array literals [1, 2,]
- unary - + !, binary * / % + -, comparisons, === !== == !=, && ||, ?:
- parentheses

There are no identifiers beyond the literal keywords, no calls, no member
access and no assignment: an expression can't reach program state, perform
I/O or mutate anything. Evaluation is a pure function of the source text.

Example:
    >>> expression_evaluate('{ foo: "bar", n: [1, 2 * 3] }')
    {'foo': 'bar', 'n': [1, 6]}
    >>> expression_evaluate('false')
    False
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..config import appsettings


class ExpressionError(ValueError):
    """Raised when an expression can't be tokenized, parsed or evaluated"""
    pass


@dataclass(frozen=True)
class Token:
    type: str      # 'number', 'string', 'name', 'punct', 'eof'
    value: Any
    position: int


_TOKEN_PATTERN = re.compile(r'''
    (?P<space>\s+)
  | (?P<number>0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+
        |(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
  | (?P<name>[A-Za-z_$][A-Za-z0-9_$]*)
  | (?P<punct>===|!==|==|!=|<=|>=|&&|\|\||[{}\[\](),:?+\-*/%!<>])
''', re.VERBOSE)

_ESCAPES = {
    'n': '\n', 't': '\t', 'r': '\r', 'b': '\b', 'f': '\f', 'v': '\v',
    '0': '\0', '\\': '\\', "'": "'", '"': '"', '`': '`', '\n': '',
}

_KEYWORDS = {
    'true': True,
    'false': False,
    'null': None,
    'undefined': None,
    'NaN': math.nan,
    'Infinity': math.inf,
}


def tokens_scan(source: str) -> List[Token]:
    """
    Split expression source into tokens

    Raises:
        ExpressionError: On characters outside the accepted language or
                         unterminated strings
    """
    tokens = []
    pos = 0

    while pos < len(source):
        char = source[pos]
        if char in '\'"`':
            text, pos_next = string_scan(source, pos)
            tokens.append(Token('string', text, pos))
            pos = pos_next
            continue

        match = _TOKEN_PATTERN.match(source, pos)
        if not match:
            raise ExpressionError(f"Unexpected character {char!r} at position {pos}")

        kind = match.lastgroup
        if kind == 'number':
            tokens.append(Token('number', number_parse(match.group()), pos))
        elif kind in ('name', 'punct'):
            tokens.append(Token(kind, match.group(), pos))
        pos = match.end()

    tokens.append(Token('eof', None, pos))
    return tokens


def string_scan(source: str, start: int) -> tuple:
    """
    Scan a quoted string starting at source[start]

    Returns:
        (decoded text, position just past the closing quote)
    """
    quote = source[start]
    chars = []
    pos = start + 1

    while pos < len(source):
        char = source[pos]
        if char == quote:
            return ''.join(chars), pos + 1
        if char == '\\':
            pos += 1
            if pos >= len(source):
                break
            escape = source[pos]
            if escape == 'u':
                if source[pos + 1:pos + 2] == '{':
                    end = source.find('}', pos)
                    digits = source[pos + 2:end] if end != -1 else ''
                    pos = end
                else:
                    digits = source[pos + 1:pos + 5]
                    pos += 4
                chars.append(codepoint_decode(digits))
            elif escape == 'x':
                chars.append(codepoint_decode(source[pos + 1:pos + 3]))
                pos += 2
            else:
                chars.append(_ESCAPES.get(escape, escape))
            pos += 1
            continue
        if quote == '`' and source.startswith('${', pos):
            raise ExpressionError("Template literal interpolation is not supported")
        if char == '\n' and quote != '`':
            break
        chars.append(char)
        pos += 1

    raise ExpressionError(f"Unterminated string starting at position {start}")


def codepoint_decode(digits: str) -> str:
    try:
        return chr(int(digits, 16))
    except (ValueError, OverflowError) as e:
        raise ExpressionError(f"Invalid escape sequence digits {digits!r}") from e


def number_parse(text: str) -> Any:
    lowered = text.lower()
    if lowered.startswith('0x'):
        return number_normalize(int(text[2:], 16))
    if lowered.startswith('0o'):
        return number_normalize(int(text[2:], 8))
    if lowered.startswith('0b'):
        return number_normalize(int(text[2:], 2))
    # float() has no digit limit and yields inf past the double range
    return number_normalize(float(text))


def number_normalize(value: Any) -> Any:
    """
    Keep numbers within double precision, as the markup's numbers have one type

    Integral floats become int; ints beyond 2**53 become float, and
    infinity once they leave the double range.
    """
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 2 ** 53:
            return int(value)
        return value
    if isinstance(value, int) and not isinstance(value, bool) and abs(value) >= 2 ** 53:
        try:
            return float(value)
        except OverflowError:
            return math.copysign(math.inf, value)
    return value


def value_isTruthy(value: Any) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return False
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


def value_toString(value: Any) -> str:
    """String conversion following the markup's (JavaScript) conventions"""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        if math.isnan(value):
            return 'NaN'
        if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        return repr(number_normalize(value))
    if isinstance(value, list):
        return ','.join('' if item is None else value_toString(item) for item in value)
    if isinstance(value, dict):
        return '[object Object]'
    return str(value)


def number_coerce(value: Any, operator: str) -> Any:
    if isinstance(value, bool):
        return int(value)
    if value is None:
        return 0
    if isinstance(value, (int, float)):
        return value
    raise ExpressionError(f"Operator '{operator}' needs numeric operands, got {value_toString(value)!r}")


def values_strictEqual(left: Any, right: Any) -> bool:
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if type(left) is not type(right):
        return False
    if isinstance(left, (dict, list)):
        return left is right
    return left == right


class ExpressionParser:
    """
    Recursive-descent evaluator over a token list

    Parsing and evaluation happen in the same pass: each grammar rule
    returns the value of the sub-expression it consumed.
    """

    def __init__(self, source: str, max_nesting: Optional[int] = None):
        self.source = source
        self.tokens = tokens_scan(source)
        self.index = 0
        self.depth = 0
        self.max_nesting = appsettings.expression_max_nesting if max_nesting is None else max_nesting

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def token_advance(self) -> Token:
        token = self.tokens[self.index]
        if token.type != 'eof':
            self.index += 1
        return token

    def punct_is(self, *values: str) -> bool:
        return self.current.type == 'punct' and self.current.value in values

    def punct_expect(self, value: str) -> None:
        if not self.punct_is(value):
            self.error(f"Expected '{value}'")
        self.token_advance()

    def error(self, message: str) -> None:
        token = self.current
        found = 'end of expression' if token.type == 'eof' else repr(token.value)
        raise ExpressionError(f"{message} at position {token.position}, found {found}")

    def evaluate(self) -> Any:
        if self.current.type == 'eof':
            self.error("Empty expression")
        value = self.conditional_parse()
        if self.current.type != 'eof':
            self.error("Unexpected token")
        return value

    def nesting_enter(self) -> None:
        self.depth += 1
        if self.depth > self.max_nesting:
            raise ExpressionError(f"Expression nesting exceeds {self.max_nesting} levels")

    def conditional_parse(self) -> Any:
        self.nesting_enter()
        try:
            condition = self.logicalOr_parse()
            if not self.punct_is('?'):
                return condition
            self.token_advance()
            consequent = self.conditional_parse()
            self.punct_expect(':')
            alternate = self.conditional_parse()
            return consequent if value_isTruthy(condition) else alternate
        finally:
            self.depth -= 1

    def logicalOr_parse(self) -> Any:
        value = self.logicalAnd_parse()
        while self.punct_is('||'):
            self.token_advance()
            right = self.logicalAnd_parse()
            value = value if value_isTruthy(value) else right
        return value

    def logicalAnd_parse(self) -> Any:
        value = self.equality_parse()
        while self.punct_is('&&'):
            self.token_advance()
            right = self.equality_parse()
            value = right if value_isTruthy(value) else value
        return value

    def equality_parse(self) -> Any:
        value = self.relational_parse()
        while self.punct_is('===', '!==', '==', '!='):
            operator = self.token_advance().value
            right = self.relational_parse()
            equal = values_strictEqual(value, right)
            value = equal if operator in ('===', '==') else not equal
        return value

    def relational_parse(self) -> Any:
        value = self.additive_parse()
        while self.punct_is('<', '<=', '>', '>='):
            operator = self.token_advance().value
            right = self.additive_parse()
            if not (isinstance(value, str) and isinstance(right, str)):
                value, right = number_coerce(value, operator), number_coerce(right, operator)
            value = {
                '<': value < right,
                '<=': value <= right,
                '>': value > right,
                '>=': value >= right,
            }[operator]
        return value

    def additive_parse(self) -> Any:
        value = self.multiplicative_parse()
        while self.punct_is('+', '-'):
            operator = self.token_advance().value
            right = self.multiplicative_parse()
            if operator == '+' and (
                isinstance(value, (str, list, dict)) or isinstance(right, (str, list, dict))
            ):
                value = value_toString(value) + value_toString(right)
                continue
            left_number = number_coerce(value, operator)
            right_number = number_coerce(right, operator)
            value = number_normalize(
                left_number + right_number if operator == '+' else left_number - right_number
            )
        return value

    def multiplicative_parse(self) -> Any:
        value = self.unary_parse()
        while self.punct_is('*', '/', '%'):
            operator = self.token_advance().value
            left = number_coerce(value, operator)
            right = number_coerce(self.unary_parse(), operator)
            if operator == '*':
                value = number_normalize(left * right)
            elif right == 0:
                if operator == '%' or left == 0 or math.isnan(left):
                    value = math.nan
                else:
                    value = math.copysign(math.inf, left) * math.copysign(1, right)
            elif operator == '/':
                value = number_normalize(float(left) / float(right))
            elif math.isinf(left) or math.isnan(left) or math.isnan(right):
                value = math.nan
            elif math.isinf(right):
                value = left
            else:
                value = number_normalize(math.fmod(left, right))
        return value

    def unary_parse(self) -> Any:
        if self.punct_is('-', '+', '!'):
            operator = self.token_advance().value
            self.nesting_enter()
            try:
                operand = self.unary_parse()
            finally:
                self.depth -= 1
            if operator == '!':
                return not value_isTruthy(operand)
            number = number_coerce(operand, operator)
            return number_normalize(-number) if operator == '-' else number
        return self.primary_parse()

    def primary_parse(self) -> Any:
        token = self.current

        if token.type in ('number', 'string'):
            self.token_advance()
            return token.value

        if token.type == 'name':
            if token.value in _KEYWORDS:
                self.token_advance()
                return _KEYWORDS[token.value]
            self.error(f"Identifier '{token.value}' is not available")

        if self.punct_is('('):
            self.token_advance()
            value = self.conditional_parse()
            self.punct_expect(')')
            return value

        if self.punct_is('['):
            return self.array_parse()

        if self.punct_is('{'):
            return self.object_parse()

        self.error("Unexpected token")

    def array_parse(self) -> List[Any]:
        self.punct_expect('[')
        self.nesting_enter()
        items = []
        try:
            while not self.punct_is(']'):
                items.append(self.conditional_parse())
                if not self.punct_is(']'):
                    self.punct_expect(',')
            self.token_advance()
        finally:
            self.depth -= 1
        return items

    def object_parse(self) -> Dict[str, Any]:
        self.punct_expect('{')
        self.nesting_enter()
        result: Dict[str, Any] = {}
        try:
            while not self.punct_is('}'):
                if self.current.type not in ('name', 'string', 'number'):
                    self.error("Expected property name")
                key_token = self.token_advance()
                key = key_token.value
                if key_token.type == 'number':
                    key = value_toString(key)
                self.punct_expect(':')
                result[key] = self.conditional_parse()
                if not self.punct_is('}'):
                    self.punct_expect(',')
            self.token_advance()
        finally:
            self.depth -= 1
        return result


def expression_evaluate(source: str, max_length: Optional[int] = None) -> Any:
    """
    Evaluate expression source in the sandbox

    Args:
        source: Text between the outer braces of {...}
        max_length: Override for the settings' expression_max_length

    Returns:
        Python value: bool, int, float, str, None, list or dict

    Raises:
        ExpressionError: For anything outside the accepted language
    """
    limit = appsettings.expression_max_length if max_length is None else max_length
    if len(source) > limit:
        raise ExpressionError(f"Expression longer than {limit} characters")
    try:
        return ExpressionParser(source).evaluate()
    except ExpressionError:
        raise
    except (ArithmeticError, ValueError) as e:
        raise ExpressionError(f"Cannot evaluate expression: {e}") from e
