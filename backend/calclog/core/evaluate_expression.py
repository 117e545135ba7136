"""Expression Evaluator — pure text-to-number arithmetic over a whitelisted AST.

Invariants:
    - evaluate_expression is PURE: no I/O, no logging, no global state
    - Result is always finite and rounded to OUTPUT_DECIMALS (round-half-up)
    - Any failure raises EvaluationError — callers never see SyntaxError/ZeroDivisionError
    - Never calls eval(): only whitelisted AST node types are interpreted

Design Decisions:
    - ast.parse over sympy.parse_expr: sympy evaluates untrusted text with eval() internally
      (ADR: expression text comes straight from clients)
    - All numbers coerced to float: huge powers raise OverflowError instead of
      allocating unbounded ints
    - `^` means exponentiation (calculator convention), not bitwise xor
    - Line breaks and tabs are ordinary whitespace: text is re-joined on single spaces
    - A parenthesized group after a number or group multiplies: 2(3) == 6, (1+2)(4) == 12
"""

import ast
import math
import operator
from decimal import Context, Decimal, ROUND_HALF_UP

from calclog.core.domain_types import MAX_EXPRESSION_LENGTH, OUTPUT_DECIMALS
from calclog.core.errors import EvaluationError


_BINARY_OPERATORS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
    ast.BitXor: operator.pow,
}

_UNARY_OPERATORS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

# Wide enough for any finite float plus the fractional digits
_ROUNDING_CONTEXT = Context(prec=400)

_CONSTANTS: dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
    "tau": math.tau,
}

_FUNCTIONS = {
    "sqrt": math.sqrt,
    "abs": abs,
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "asin": math.asin,
    "acos": math.acos,
    "atan": math.atan,
    "log": math.log,
    "log10": math.log10,
    "log2": math.log2,
    "exp": math.exp,
    "floor": math.floor,
    "ceil": math.ceil,
    "round": round,
    "min": min,
    "max": max,
    "pow": math.pow,
}


def evaluate_expression(text: str) -> float:
    """Evaluate an arithmetic expression and round the result to 2 places.

    Raises EvaluationError for empty text, syntax errors, unknown symbols,
    division by zero, domain errors and non-finite results.
    """
    if text is None or not text.strip():
        raise EvaluationError("expression is empty")
    if len(text) > MAX_EXPRESSION_LENGTH:
        raise EvaluationError(
            f"expression longer than {MAX_EXPRESSION_LENGTH} characters",
        )

    try:
        tree = ast.parse(" ".join(text.split()), mode="eval")
        value = _eval_node(tree.body)
        if not isinstance(value, float):
            raise EvaluationError("result is not a real number")
        if not math.isfinite(value):
            raise EvaluationError("result is not finite")
        return round_output(value)
    except EvaluationError:
        raise
    except ZeroDivisionError:
        raise EvaluationError("division by zero")
    except (SyntaxError, ValueError, TypeError, ArithmeticError, RecursionError) as e:
        raise EvaluationError(str(e) or type(e).__name__)


def round_output(value: float) -> float:
    """Round half-up to OUTPUT_DECIMALS places (2.675 -> 2.68, -1.005 -> -1.01)."""
    quantum = Decimal(1).scaleb(-OUTPUT_DECIMALS)
    rounded = float(Decimal(repr(value)).quantize(
        quantum, rounding=ROUND_HALF_UP, context=_ROUNDING_CONTEXT,
    ))
    # Normalize -0.0 so "-0.001" reports 0
    return rounded + 0.0


def _eval_node(node: ast.AST) -> float:
    match node:
        case ast.Constant(value=bool()):
            raise EvaluationError("booleans are not numbers")
        case ast.Constant(value=int() | float() as value):
            return float(value)
        case ast.BinOp(left=left, op=op, right=right) if type(op) in _BINARY_OPERATORS:
            return _BINARY_OPERATORS[type(op)](_eval_node(left), _eval_node(right))
        case ast.UnaryOp(op=op, operand=operand) if type(op) in _UNARY_OPERATORS:
            return _UNARY_OPERATORS[type(op)](_eval_node(operand))
        case ast.Name(id=name):
            if name not in _CONSTANTS:
                raise EvaluationError(f"unknown symbol '{name}'")
            return _CONSTANTS[name]
        case ast.Call(func=ast.Name(id=name), args=args, keywords=[]):
            if name not in _FUNCTIONS:
                raise EvaluationError(f"unknown function '{name}'")
            if not args:
                raise EvaluationError(f"function '{name}' needs an argument")
            return float(_FUNCTIONS[name](*(_eval_node(a) for a in args)))
        case ast.Call(func=ast.Constant() | ast.BinOp() | ast.UnaryOp() | ast.Call() as factor,
                      args=[operand], keywords=[]):
            return _eval_node(factor) * _eval_node(operand)
    raise EvaluationError(f"unsupported syntax '{type(node).__name__}'")
