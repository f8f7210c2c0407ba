from dicedist.evaluate import (
    DEFAULT_MAX_EXACT_OUTCOMES,
    Mode,
    evaluate_exact,
    evaluate_monte_carlo,
)
from dicedist.roll import (
    Add,
    BinaryOp,
    DiceRollError,
    Div,
    Expression,
    Mul,
    ParseError,
    Roll,
    Sub,
    TooManyOutcomesError,
)
from dicedist.roll_parser import parse
from dicedist.summary import Summary, Weighting, summarize
