import typing

import numpy


class Number(float):
    def __repr__(self) -> str:
        result = f"{float(self):.2f}"
        if result.endswith(".00"):
            result = result[:-3]
        return result


class DiceRollError(ValueError):
    pass


class ParseError(DiceRollError):
    pass


class TooManyOutcomesError(DiceRollError, OverflowError):
    pass


_NAN = float("nan")


def _combine(
    table1: typing.Dict[float, float],
    table2: typing.Dict[float, float],
    op: typing.Callable[[float, float], float],
) -> typing.Dict[float, float]:
    result: typing.Dict[float, float] = {}
    for key1, value1 in table1.items():
        for key2, value2 in table2.items():
            new_key = float(op(key1, key2))
            if new_key != new_key:
                # every nan lands in one bucket
                new_key = _NAN
            result.setdefault(new_key, 0.0)
            result[new_key] += value1 * value2
    return result


class Expression:
    """A node of a parsed dice expression.

    Nodes are immutable and compare structurally. Every node can enumerate
    its exact outcomes, draw vectorized samples, and report its expected value.
    """

    __slots__ = ()

    def __setattr__(self, name, value):
        raise AttributeError("'%s' is immutable" % type(self).__name__)

    def __delattr__(self, name):
        raise AttributeError("'%s' is immutable" % type(self).__name__)

    def constant(self) -> bool:
        return True

    def outcome_count(self, limit: typing.Optional[int] = None) -> int:
        """Length of the sequence returned by outcomes().

        With a limit, counting stops as soon as the length exceeds it and some
        value above the limit is returned instead of the exact length.
        """
        raise NotImplementedError

    def outcomes(self) -> numpy.ndarray:
        """Every equally likely outcome, one entry per combination of faces."""
        raise NotImplementedError

    def sample(self, rng, n: int) -> numpy.ndarray:
        """Draw n independent values, using rng.random(n) for uniform [0, 1) floats."""
        raise NotImplementedError

    def probability_table(self) -> typing.Dict[float, float]:
        raise NotImplementedError

    def mean(self, max_outcomes: typing.Optional[int] = None) -> float:
        """Expected value. Raises TooManyOutcomesError when a divisor has more
        than max_outcomes outcomes to tabulate."""
        raise NotImplementedError


class Roll(Expression):
    __slots__ = ("count", "sides")

    def __init__(self, count: int, sides: int = 1) -> None:
        if count < 1:
            raise DiceRollError("attempted to roll %s dice" % count)
        if sides < 1:
            raise DiceRollError("attempted to roll a die with %s faces" % sides)
        object.__setattr__(self, "count", int(count))
        object.__setattr__(self, "sides", int(sides))

    def constant(self) -> bool:
        return self.sides == 1

    def outcome_count(self, limit: typing.Optional[int] = None) -> int:
        if limit is None or self.constant():
            return self.sides**self.count
        result = 1
        for _ in range(self.count):
            result *= self.sides
            if result > limit:
                break
        return result

    def outcomes(self) -> numpy.ndarray:
        if self.constant():
            return numpy.array([float(self.count)])
        faces = numpy.arange(1, self.sides + 1, dtype=float)
        result = numpy.zeros(1)
        for _ in range(self.count):
            result = numpy.add.outer(result, faces).ravel()
        return result

    def sample(self, rng, n: int) -> numpy.ndarray:
        if self.constant():
            return numpy.full(n, float(self.count))
        result = numpy.zeros(n)
        for _ in range(self.count):
            result += numpy.floor(rng.random(n) * self.sides) + 1
        return result

    def probability_table(self) -> typing.Dict[float, float]:
        if self.constant():
            return {float(self.count): 1.0}
        die = {float(i): 1 / self.sides for i in range(1, self.sides + 1)}
        result = {0.0: 1.0}
        for _ in range(self.count):
            result = _combine(result, die, lambda x, y: x + y)
        return result

    def mean(self, max_outcomes: typing.Optional[int] = None) -> float:
        return self.count * (self.sides + 1) / 2

    def __eq__(self, other) -> bool:
        if not isinstance(other, Roll):
            return NotImplemented
        return self.count == other.count and self.sides == other.sides

    def __hash__(self) -> int:
        return hash((Roll, self.count, self.sides))

    def __repr__(self) -> str:
        if self.constant():
            return str(self.count)
        return "%sd%s" % (self.count, self.sides)


class BinaryOp(Expression):
    __slots__ = ("left", "right")

    operator: typing.ClassVar[str]

    def __init__(self, left: Expression, right: Expression) -> None:
        if type(self) is BinaryOp:
            raise TypeError("BinaryOp is abstract; use Add, Sub, Mul or Div")
        object.__setattr__(self, "left", left)
        object.__setattr__(self, "right", right)

    def op(self, lhs, rhs):
        raise NotImplementedError

    def constant(self) -> bool:
        return self.left.constant() and self.right.constant()

    def outcome_count(self, limit: typing.Optional[int] = None) -> int:
        left = self.left.outcome_count(limit)
        if limit is not None and left > limit:
            return left
        return left * self.right.outcome_count(limit)

    def outcomes(self) -> numpy.ndarray:
        left = self.left.outcomes()
        right = self.right.outcomes()
        return self.op(left[:, numpy.newaxis], right[numpy.newaxis, :]).ravel()

    def sample(self, rng, n: int) -> numpy.ndarray:
        return self.op(self.left.sample(rng, n), self.right.sample(rng, n))

    def probability_table(self) -> typing.Dict[float, float]:
        return _combine(
            self.left.probability_table(), self.right.probability_table(), self.op
        )

    def mean(self, max_outcomes: typing.Optional[int] = None) -> float:
        # subtrees share no dice, so they are independent
        return float(
            self.op(self.left.mean(max_outcomes), self.right.mean(max_outcomes))
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, BinaryOp):
            return NotImplemented
        return (
            self.operator == other.operator
            and self.left == other.left
            and self.right == other.right
        )

    def __hash__(self) -> int:
        return hash((self.operator, self.left, self.right))

    def __repr__(self) -> str:
        if isinstance(self.right, BinaryOp):
            return "%s %s (%s)" % (self.left, self.operator, self.right)
        return "%s %s %s" % (self.left, self.operator, self.right)


class Add(BinaryOp):
    __slots__ = ()
    operator = "+"

    def op(self, lhs, rhs):
        return numpy.add(lhs, rhs)


class Sub(BinaryOp):
    __slots__ = ()
    operator = "-"

    def op(self, lhs, rhs):
        return numpy.subtract(lhs, rhs)


class Mul(BinaryOp):
    __slots__ = ()
    operator = "*"

    def op(self, lhs, rhs):
        return numpy.multiply(lhs, rhs)


class Div(BinaryOp):
    __slots__ = ()
    operator = "/"

    def op(self, lhs, rhs):
        # x/0 is +-inf and 0/0 is nan, as in real-number division
        with numpy.errstate(divide="ignore", invalid="ignore"):
            return numpy.divide(lhs, rhs)

    def mean(self, max_outcomes: typing.Optional[int] = None) -> float:
        if (
            max_outcomes is not None
            and self.right.outcome_count(max_outcomes) > max_outcomes
        ):
            raise TooManyOutcomesError(
                "the divisor %s has more than %s outcomes to tabulate"
                % (self.right, max_outcomes)
            )
        reciprocal = 0.0
        for key, value in self.right.probability_table().items():
            reciprocal += value * float(self.op(1.0, key))
        with numpy.errstate(invalid="ignore"):
            return float(numpy.multiply(self.left.mean(max_outcomes), reciprocal))


OPERATORS: typing.Dict[str, typing.Type[BinaryOp]] = {
    op.operator: op for op in (Add, Sub, Mul, Div)
}


def binary_op(operator: str, left: Expression, right: Expression) -> BinaryOp:
    if operator not in OPERATORS:
        raise DiceRollError("unknown operator %s" % operator)
    return OPERATORS[operator](left, right)
