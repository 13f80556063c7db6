"""fuzzlang - front end for a program-fuzzing toolkit.

Compiles two small domain-specific languages into typed abstract syntax:
the program language (type declarations, variables, function signatures,
statements) and the generator language (typed value producers). Both
ASTs serialize back to source for round-tripping.

Public API:
    parse_program - Parse program source to a Program
    parse_generators - Parse generator source to a tuple of UserGen
    serialize_program - Serialize a Program to source
    serialize_generators - Serialize UserGen values to source
    ProgramParser / GeneratorParser - Configurable parsers (limits, precedence)

Exceptions:
    FuzzLangError - Base exception class
    FuzzSyntaxError - Malformed source
    UnknownTypeError - Unrecognized type name
    ConstantValueError - Malformed or out-of-range integer literal
    UnsupportedConstantTypeError - Constant of a non-integer type
    UnresolvedTypeError - Named type missing from a TypeTable

Submodules:
    fuzzlang.syntax - Program AST, parser, serializer, visitor, TypeTable
    fuzzlang.generators - Generator AST, parser, serializer
    fuzzlang.typesys - Native kinds and resolved Type values
    fuzzlang.diagnostics - Diagnostic codes, templates, formatter
"""

from .diagnostics import (
    ConstantValueError,
    DuplicateTypeError,
    FuzzLangError,
    FuzzSyntaxError,
    SerializationValidationError,
    UnknownTypeError,
    UnresolvedTypeError,
    UnsupportedConstantTypeError,
)
from .enums import ArithmeticPrecedence
from .generators import GeneratorParser, parse_generators, serialize_generators
from .syntax import ProgramParser, parse_program, serialize_program

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("fuzzlang")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "ArithmeticPrecedence",
    "ConstantValueError",
    "DuplicateTypeError",
    "FuzzLangError",
    "FuzzSyntaxError",
    "GeneratorParser",
    "ProgramParser",
    "SerializationValidationError",
    "UnknownTypeError",
    "UnresolvedTypeError",
    "UnsupportedConstantTypeError",
    "__version__",
    "parse_generators",
    "parse_program",
    "serialize_generators",
    "serialize_program",
]
