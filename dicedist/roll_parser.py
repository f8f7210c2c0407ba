import logging
import os

import lark

import dicedist.roll as roll

logger = logging.getLogger(__name__)

_USAGE = "Use a format like '1d6', '2d10+1d4' or '(2d6+1d4)*2'"


def _positive(token: lark.Token, what: str) -> int:
    value = int(token)
    if value < 1:
        raise roll.ParseError(
            "Invalid dice expression: %s must be positive, got %s. %s"
            % (what, token, _USAGE)
        )
    return value


@lark.v_args(inline=True)
class _RollParser(lark.Transformer):
    add = roll.Add
    sub = roll.Sub
    mul = roll.Mul
    div = roll.Div

    def dice(self, count: lark.Token, sides: lark.Token) -> roll.Roll:
        return roll.Roll(_positive(count, "dice count"), _positive(sides, "sides"))

    def constant(self, value: lark.Token) -> roll.Roll:
        return roll.Roll(_positive(value, "constant"), 1)


_grammar_file = os.path.join(os.path.dirname(__file__), "dice.lark")
with open(_grammar_file) as f:
    _grammar = lark.Lark(f.read(), parser="lalr")


def parse(text: str) -> roll.Expression:
    expression = "".join(text.split())
    if not expression:
        raise roll.ParseError("Invalid dice expression: nothing to roll. %s" % _USAGE)
    try:
        result = _RollParser().transform(_grammar.parse(expression))
    except lark.exceptions.VisitError as e:
        raise e.orig_exc
    except lark.exceptions.UnexpectedInput:
        raise roll.ParseError("Invalid dice expression '%s'. %s" % (expression, _USAGE))
    logger.debug("parsed %r as %r", text, result)
    return result
