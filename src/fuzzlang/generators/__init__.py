"""Generator-language package.

Parses ``generator <name> <Type> (state <expression>)+`` sources into
UserGen values and prints them back.

Python 3.13+.
"""

from .ast import (
    Constant,
    ConstExpr,
    Expression,
    GenCompound,
    MaxExpr,
    MinExpr,
    RandomExpr,
    Signed,
    StringConstant,
    Unsigned,
    UserGen,
)
from .parser import GeneratorParser, constant_for_type, parse_generators
from .serializer import GeneratorSerializer, serialize_generators

__all__ = [
    "ConstExpr",
    "Constant",
    "Expression",
    "GenCompound",
    "GeneratorParser",
    "GeneratorSerializer",
    "MaxExpr",
    "MinExpr",
    "RandomExpr",
    "Signed",
    "StringConstant",
    "Unsigned",
    "UserGen",
    "constant_for_type",
    "parse_generators",
    "serialize_generators",
]
