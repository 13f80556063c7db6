"""Hypothesis strategies for diagnostics domain testing.

Provides event-emitting strategies for SourceSpan, Diagnostic and
DiagnosticFormatter values.

Event-Emitting Strategies (HypoFuzz-Optimized):
    - diag_span_size: SourceSpan size classification (zero|small|large)
    - diag_has_span: Whether Diagnostic has SourceSpan (true|false)
    - diag_code_range: DiagnosticCode range classification
    - diag_fmt_format: DiagnosticFormatter output format (rust|simple|json)
"""

from __future__ import annotations

from hypothesis import event
from hypothesis import strategies as st

from fuzzlang.diagnostics import (
    Diagnostic,
    DiagnosticCode,
    DiagnosticFormatter,
    OutputFormat,
    SourceSpan,
)

_TEXT = st.text(
    alphabet=st.characters(codec="utf-8", exclude_categories=("Cs",)),
    min_size=1,
    max_size=60,
)


@st.composite
def source_spans(draw: st.DrawFn) -> SourceSpan:
    """Generate SourceSpan instances.

    Events emitted:
    - diag_span_size={zero|small|large}: Span size classification
    """
    label = draw(st.sampled_from(["zero", "small", "large"]))
    start = draw(st.integers(min_value=0, max_value=100_000))
    match label:
        case "zero":
            end = start
        case "small":
            end = start + draw(st.integers(min_value=1, max_value=99))
        case _:
            end = start + draw(st.integers(min_value=100, max_value=10_000))
    event(f"diag_span_size={label}")
    line = draw(st.integers(min_value=1, max_value=5000))
    column = draw(st.integers(min_value=1, max_value=500))
    return SourceSpan(start=start, end=end, line=line, column=column)


@st.composite
def diagnostics(draw: st.DrawFn) -> Diagnostic:
    """Generate Diagnostic instances with optional span, hint and expected.

    Events emitted:
    - diag_has_span={true|false}
    - diag_code_range={syntax|typing|resolution|limit}
    """
    code = draw(st.sampled_from(list(DiagnosticCode)))
    match code.value // 1000:
        case 3:
            event("diag_code_range=syntax")
        case 4:
            event("diag_code_range=typing")
        case 5:
            event("diag_code_range=resolution")
        case _:
            event("diag_code_range=limit")

    span = draw(st.none() | source_spans())
    event(f"diag_has_span={str(span is not None).lower()}")
    return Diagnostic(
        code=code,
        message=draw(_TEXT),
        span=span,
        hint=draw(st.none() | _TEXT),
        found=draw(st.none() | _TEXT),
        expected=tuple(draw(st.lists(_TEXT, max_size=3))),
        severity=draw(st.sampled_from(["error", "warning"])),
    )


@st.composite
def diagnostic_formatters(draw: st.DrawFn) -> DiagnosticFormatter:
    """Generate DiagnosticFormatter configurations.

    Events emitted:
    - diag_fmt_format={rust|simple|json}
    """
    output_format = draw(st.sampled_from(list(OutputFormat)))
    event(f"diag_fmt_format={output_format}")
    return DiagnosticFormatter(
        output_format=output_format,
        sanitize=draw(st.booleans()),
        color=draw(st.booleans()),
        max_content_length=draw(st.integers(min_value=10, max_value=200)),
    )
