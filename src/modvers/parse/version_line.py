"""Locate and evaluate a module's version assignment without running the module."""

from __future__ import annotations

import ast
import operator
import re
from functools import lru_cache
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

MAX_VALUE_LENGTH = 256
MAX_INT_BITS = 256

_BINARY_OPS: dict[type[ast.operator], Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
}

_UNARY_OPS: dict[type[ast.unaryop], Callable[[Any], Any]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


class UnsupportedExpression(ValueError):
    """Raised when a version line is not a plain literal expression."""


@lru_cache(maxsize=8)
def _assignment_pattern(attributes: tuple[str, ...]) -> re.Pattern[str]:
    names = "|".join(re.escape(attr) for attr in attributes)
    # Optional annotation between the name and "="; "==" is a comparison.
    return re.compile(rf"^\s*(?:{names})\s*(?::[^=]*)?=(?!=)")


def find_version_line(lines: Iterable[str], attributes: Sequence[str]) -> str | None:
    """Return the first line that assigns one of ``attributes``.

    Examples:
        >>> find_version_line(["import os", "__version__ = '1'"], ["__version__"])
        "__version__ = '1'"
    """
    pattern = _assignment_pattern(tuple(attributes))
    for line in lines:
        if pattern.match(line):
            return line
    return None


def _is_literal(value: object) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def _check_repeat(left: Any, right: Any) -> None:
    """Refuse sequence repetition that would exceed the value cap."""
    for seq, count in ((left, right), (right, left)):
        if isinstance(seq, (str, tuple)) and isinstance(count, int):
            if len(seq) * count > MAX_VALUE_LENGTH:
                msg = "repeated value exceeds the length limit"
                raise UnsupportedExpression(msg)


def _check_int_size(value: Any) -> Any:
    if isinstance(value, int) and abs(value).bit_length() > MAX_INT_BITS:
        msg = "integer value exceeds the size limit"
        raise UnsupportedExpression(msg)
    return value


def _evaluate(node: ast.AST) -> Any:
    if isinstance(node, ast.Constant) and _is_literal(node.value):
        return _check_int_size(node.value)

    if isinstance(node, ast.Tuple):
        return tuple(_evaluate(element) for element in node.elts)

    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        operand = _evaluate(node.operand)
        if not isinstance(operand, (int, float)):
            msg = "unary operator applied to a non-number"
            raise UnsupportedExpression(msg)
        return _UNARY_OPS[type(node.op)](operand)

    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        left = _evaluate(node.left)
        right = _evaluate(node.right)
        if isinstance(node.op, ast.Mult):
            _check_repeat(left, right)
        try:
            result = _BINARY_OPS[type(node.op)](left, right)
        except TypeError as exc:
            raise UnsupportedExpression(str(exc)) from exc
        if isinstance(result, (str, tuple)) and len(result) > MAX_VALUE_LENGTH:
            msg = "value exceeds the length limit"
            raise UnsupportedExpression(msg)
        return _check_int_size(result)

    msg = f"unsupported expression: {type(node).__name__}"
    raise UnsupportedExpression(msg)


def _assigned_value(statement: ast.stmt, attributes: Sequence[str]) -> ast.expr | None:
    if isinstance(statement, ast.Assign):
        for target in statement.targets:
            if isinstance(target, ast.Name) and target.id in attributes:
                return statement.value
    elif isinstance(statement, ast.AnnAssign) and statement.value is not None:
        target = statement.target
        if isinstance(target, ast.Name) and target.id in attributes:
            return statement.value
    return None


def evaluate_version_line(line: str, attributes: Sequence[str]) -> Any:
    """Evaluate the value assigned on a single version line.

    Only this line is parsed, and only literal strings and numbers combined
    with ``+``, ``-``, ``*``, unary signs and tuples are evaluated. Any type
    annotation or trailing comment on the line is dropped.

    Args:
        line: The source line returned by :func:`find_version_line`.
        attributes: Accepted version attribute names.

    Returns:
        The evaluated str, int, float or tuple.

    Raises:
        UnsupportedExpression: If the line does not parse on its own or the
            assigned value is anything but a plain literal expression.
    """
    try:
        tree = ast.parse(line.strip(), mode="exec")
    except (SyntaxError, ValueError) as exc:
        msg = f"version line does not parse on its own: {exc}"
        raise UnsupportedExpression(msg) from exc

    for statement in tree.body:
        value = _assigned_value(statement, attributes)
        if value is not None:
            return _evaluate(value)

    msg = "line does not assign a version attribute"
    raise UnsupportedExpression(msg)


def version_to_text(value: object) -> str | None:
    """Turn an evaluated or loaded version value into a raw version string.

    Runs of whitespace, newlines included, collapse to one space so the
    result always fits on a single output line. Characters UTF-8 cannot
    encode, such as lone surrogates, are backslash-escaped. Blank values
    become None.

    Examples:
        >>> version_to_text((1, 2, 3))
        '1.2.3'
        >>> version_to_text(" 2.0 ")
        '2.0'
        >>> version_to_text("") is None
        True
    """
    if value is None:
        return None
    if isinstance(value, (tuple, list)):
        text = ".".join(str(part) for part in value)
    else:
        text = str(value)
    text = text.encode("utf-8", "backslashreplace").decode("utf-8")
    return " ".join(text.split()) or None


__all__ = [
    "MAX_INT_BITS",
    "MAX_VALUE_LENGTH",
    "UnsupportedExpression",
    "evaluate_version_line",
    "find_version_line",
    "version_to_text",
]
