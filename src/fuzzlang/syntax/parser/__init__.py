"""Program-language parser module.

Module Organization:
- core.py: Main ProgramParser class and parse() entry point
- primitives.py: Basic scanners (identifiers, keywords, numbers) and ParseContext
- declarations.py: Includes, type, variable, and function declarations
- expressions.py: Five-level expression precedence engine
- statements.py: Statement forms and braced bodies

Public API:
    ProgramParser: Main parser class
    ParseContext: Parse context for depth tracking (advanced usage)
"""

from fuzzlang.syntax.parser.core import ProgramParser
from fuzzlang.syntax.parser.primitives import ParseContext

__all__ = ["ParseContext", "ProgramParser"]
