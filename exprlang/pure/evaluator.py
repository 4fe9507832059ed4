"""Tree-walking evaluator. Computes the integer value of an expression given the global function table and the symbol
table of the current call.

Scoping is flat: a function body only sees its own parameters, never the caller's. Evaluation order is fixed: binary
operands left before right (both always evaluated), call arguments in order before the body.
"""

from exprlang.lang.error import ArgumentNumberMismatch, ArithmeticTrap, FunctionNotFound, ParameterNotFound
from exprlang.pure.lexical import Binary, Call, Conditional, Constant, Identifier, Negate


def divide(left, right):
    """Integer division truncating towards zero."""
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def remainder(left, right):
    """Remainder of divide: has the sign of left."""
    return left - right * divide(left, right)


OPERATIONS = {
    "+": lambda left, right: left + right,
    "-": lambda left, right: left - right,
    "*": lambda left, right: left * right,
    "/": divide,
    "%": remainder,
    "<": lambda left, right: int(left < right),
    ">": lambda left, right: int(left > right),
}


def evaluate(node, functions, symbols=None):
    """Returns the value of node. functions is the dict of name: Function, symbols the dict of parameter: value of the
    current call frame. Raises an InterpreterRuntimeError on the first failure.
    """
    if symbols is None:
        symbols = {}

    if isinstance(node, Constant):
        return node.value

    elif isinstance(node, Negate):
        return -evaluate(node.inner, functions, symbols)

    elif isinstance(node, Binary):
        left = evaluate(node.left, functions, symbols)
        right = evaluate(node.right, functions, symbols)
        try:
            return OPERATIONS[node.operation](left, right)
        except ArithmeticError:
            raise ArithmeticTrap(node, node.row, node.column) from None

    elif isinstance(node, Conditional):
        if evaluate(node.condition, functions, symbols) != 0:
            return evaluate(node.if_branch, functions, symbols)
        return evaluate(node.else_branch, functions, symbols)

    elif isinstance(node, Identifier):
        try:
            return symbols[node.name]
        except KeyError:
            raise ParameterNotFound(node.name, node.row, node.column) from None

    elif isinstance(node, Call):
        return call(node, functions, symbols)

    raise TypeError(f"cannot evaluate {type(node).__name__}")


def call(node, functions, symbols):
    """Evaluates node's arguments in the caller's frame, then the callee's body in a fresh frame."""
    function = functions.get(node.name)
    if function is None:
        raise FunctionNotFound(node.name, node.row, node.column)
    if len(node.arguments) != function.arity:
        raise ArgumentNumberMismatch(node.name, node.row, node.column)

    frame = {}
    for parameter, argument in zip(function.parameters, node.arguments):
        frame[parameter] = evaluate(argument, functions, symbols)  # repeated parameters: last one wins

    return evaluate(function.body, functions, frame)
