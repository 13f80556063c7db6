"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan


def _describe(found: str) -> str:
    """Quote offending text for messages, keeping whitespace visible."""
    return repr(found) if found else "nothing"


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This keeps messages testable, consistent, and documents every error case.
    """

    # =========================================================================
    # SYNTAX ERRORS (3000-3999)
    # =========================================================================

    @staticmethod
    def unexpected_eof(expected: tuple[str, ...], span: SourceSpan | None) -> Diagnostic:
        """Input ended while a construct was still open.

        Args:
            expected: What the parser needed next
            span: Location of end of input

        Returns:
            Diagnostic for UNEXPECTED_EOF
        """
        wanted = " or ".join(expected) if expected else "more input"
        msg = f"Unexpected end of input, expected {wanted}"
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_EOF,
            message=msg,
            span=span,
            hint="Check for unclosed braces or incomplete declarations",
            expected=expected,
        )

    @staticmethod
    def unexpected_token(
        found: str,
        expected: tuple[str, ...],
        span: SourceSpan | None,
        hint: str | None = None,
    ) -> Diagnostic:
        """Parser met text it could not accept at this point.

        Args:
            found: Offending source text
            expected: Tokens or constructs the parser would have accepted
            span: Location of the offending text
            hint: Optional suggestion

        Returns:
            Diagnostic for UNEXPECTED_TOKEN
        """
        wanted = " or ".join(expected) if expected else "a different token"
        msg = f"Expected {wanted}, found {_describe(found)}"
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_TOKEN,
            message=msg,
            span=span,
            hint=hint,
            found=found,
            expected=expected,
        )

    @staticmethod
    def reserved_word(word: str, span: SourceSpan | None) -> Diagnostic:
        """Keyword or builtin type name used where an identifier is required.

        Args:
            word: The reserved word
            span: Location of the word

        Returns:
            Diagnostic for RESERVED_WORD
        """
        msg = f"'{word}' is a reserved word and cannot be used as an identifier"
        return Diagnostic(
            code=DiagnosticCode.RESERVED_WORD,
            message=msg,
            span=span,
            hint="Rename the variable, field or function",
            found=word,
            expected=("identifier",),
        )

    @staticmethod
    def empty_generator(name: str, span: SourceSpan | None) -> Diagnostic:
        """Generator declared without any state.

        Args:
            name: Generator name
            span: Location after the generator header

        Returns:
            Diagnostic for EMPTY_GENERATOR
        """
        msg = f"Generator '{name}' must declare at least one state"
        return Diagnostic(
            code=DiagnosticCode.EMPTY_GENERATOR,
            message=msg,
            span=span,
            hint="Add one or more 'state <expression>' lines",
            expected=("state",),
        )

    @staticmethod
    def nesting_depth_exceeded(max_depth: int, span: SourceSpan | None) -> Diagnostic:
        """Parse nesting exceeded the configured limit.

        Args:
            max_depth: Configured maximum nesting depth
            span: Location where the limit was hit

        Returns:
            Diagnostic for PARSE_NESTING_DEPTH_EXCEEDED
        """
        msg = f"Maximum nesting depth ({max_depth}) exceeded"
        return Diagnostic(
            code=DiagnosticCode.PARSE_NESTING_DEPTH_EXCEEDED,
            message=msg,
            span=span,
            hint="Flatten nested blocks or raise max_nesting_depth",
        )

    @staticmethod
    def declaration_out_of_order(
        keyword: str, phase: str, reached: str, span: SourceSpan | None
    ) -> Diagnostic:
        """Declaration written after a later phase has begun.

        Args:
            keyword: Declaration keyword found
            phase: Phase the declaration belongs to
            reached: Phase the parser had already reached
            span: Location of the keyword

        Returns:
            Diagnostic for DECLARATION_OUT_OF_ORDER
        """
        msg = f"'{keyword}' starts a {phase} but {reached} have already begun"
        return Diagnostic(
            code=DiagnosticCode.DECLARATION_OUT_OF_ORDER,
            message=msg,
            span=span,
            hint="Order declarations as includes, types, variables, functions, then statements",
            found=keyword,
        )

    # =========================================================================
    # TYPING ERRORS (4000-4999)
    # =========================================================================

    @staticmethod
    def unknown_type(name: str, span: SourceSpan | None = None) -> Diagnostic:
        """Type name not in the recognized set.

        Args:
            name: Offending type name
            span: Location of the name, if parsing

        Returns:
            Diagnostic for UNKNOWN_TYPE
        """
        msg = f"Unknown type '{name}'"
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_TYPE,
            message=msg,
            span=span,
            hint="Valid generator types are I8, I16, I32, I64, U8, U16, U32, U64",
            found=name,
        )

    @staticmethod
    def constant_out_of_range(text: str, span: SourceSpan | None = None) -> Diagnostic:
        """Integer literal does not fit in a signed 64-bit value.

        Args:
            text: Literal text
            span: Location of the literal

        Returns:
            Diagnostic for CONSTANT_OUT_OF_RANGE
        """
        msg = f"Integer literal '{text}' does not fit in 64 bits"
        return Diagnostic(
            code=DiagnosticCode.CONSTANT_OUT_OF_RANGE,
            message=msg,
            span=span,
            hint="Literals must lie in [-9223372036854775808, 9223372036854775807]",
            found=text,
        )

    @staticmethod
    def constant_malformed(text: str, span: SourceSpan | None = None) -> Diagnostic:
        """Integer literal text is not a digit sequence.

        Args:
            text: Literal text
            span: Location of the literal

        Returns:
            Diagnostic for CONSTANT_MALFORMED
        """
        msg = f"Malformed integer literal '{text}'"
        return Diagnostic(
            code=DiagnosticCode.CONSTANT_MALFORMED,
            message=msg,
            span=span,
            found=text,
            expected=("digits",),
        )

    @staticmethod
    def unsupported_constant_type(
        type_name: str, span: SourceSpan | None = None
    ) -> Diagnostic:
        """Constant requested for a non-integer type.

        Args:
            type_name: Rendered type name
            span: Location of the type token

        Returns:
            Diagnostic for UNSUPPORTED_CONSTANT_TYPE
        """
        msg = f"Cannot build an integer constant of type '{type_name}'"
        return Diagnostic(
            code=DiagnosticCode.UNSUPPORTED_CONSTANT_TYPE,
            message=msg,
            span=span,
            hint="Constants need a signed or unsigned integer type",
            found=type_name,
        )

    # =========================================================================
    # RESOLUTION ERRORS (5000-5999)
    # =========================================================================

    @staticmethod
    def unresolved_struct(name: str) -> Diagnostic:
        """Struct reference has no definition.

        Args:
            name: Referenced struct name

        Returns:
            Diagnostic for UNRESOLVED_STRUCT
        """
        msg = f"Struct '{name}' is referenced but never defined"
        return Diagnostic(
            code=DiagnosticCode.UNRESOLVED_STRUCT,
            message=msg,
            hint=f"Declare 'struct {name} {{ ... }}' before use",
            found=name,
        )

    @staticmethod
    def unresolved_enum(name: str) -> Diagnostic:
        """Enum reference has no definition.

        Args:
            name: Referenced enum name

        Returns:
            Diagnostic for UNRESOLVED_ENUM
        """
        msg = f"Enum '{name}' is referenced but never defined"
        return Diagnostic(
            code=DiagnosticCode.UNRESOLVED_ENUM,
            message=msg,
            hint=f"Declare 'enum {name} {{ ... }}' before use",
            found=name,
        )

    @staticmethod
    def duplicate_type(name: str) -> Diagnostic:
        """Same user-defined type name declared twice.

        Args:
            name: Duplicated type name

        Returns:
            Diagnostic for DUPLICATE_TYPE
        """
        msg = f"Type '{name}' is declared more than once"
        return Diagnostic(
            code=DiagnosticCode.DUPLICATE_TYPE,
            message=msg,
            found=name,
        )

    # =========================================================================
    # LIMIT ERRORS (6000-6999)
    # =========================================================================

    @staticmethod
    def expression_depth_exceeded(max_depth: int) -> Diagnostic:
        """Traversal depth limit exceeded.

        Args:
            max_depth: Configured maximum depth

        Returns:
            Diagnostic for MAX_DEPTH_EXCEEDED
        """
        msg = f"Maximum traversal depth ({max_depth}) exceeded"
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=msg,
            hint="The AST is nested too deeply; check for programmatic construction errors",
        )
