"""Result object returned by the non-raising parse functions."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sml_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseError,
    PerformanceMetrics,
)
from sml_parser.tree import SMLDocument, SMLElement


@dataclass
class ParseResult:
    """Outcome of :func:`~sml_parser.api.parser.parse_string` and friends.

    On success ``document`` holds the tree; on failure ``error`` holds the
    exception that would have been raised and ``diagnostics`` describes it.
    """

    document: Optional[SMLDocument] = None
    success: bool = True
    error: Optional[ParseError] = None
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    source: Optional[str] = None
    correlation_id: Optional[str] = None

    @property
    def root(self) -> Optional[SMLElement]:
        return self.document.root if self.document else None

    @property
    def element_count(self) -> int:
        return self.document.total_elements if self.document else 0

    @property
    def processing_time_ms(self) -> float:
        return self.performance.processing_time_ms

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        line_num: Optional[int] = None,
        column: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                line_num=line_num,
                column=column,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def raise_for_error(self) -> SMLDocument:
        """Return the document, or raise the stored parse error."""
        if self.error is not None:
            raise self.error
        if self.document is None:
            message = self.diagnostics[0].message if self.diagnostics else "No document parsed"
            raise ValueError(message)
        return self.document

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the parse result."""
        summary: Dict[str, Any] = {
            "source": self.source,
            "success": self.success,
            "element_count": self.element_count,
            "attribute_count": self.document.total_attributes if self.document else 0,
            "max_depth": self.document.max_depth if self.document else 0,
            "rows_processed": self.performance.rows_processed,
            "processing_time_ms": self.performance.processing_time_ms,
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
        }
        if self.error is not None:
            summary["error"] = {
                "type": type(self.error).__name__,
                "error_type": getattr(getattr(self.error, "error_type", None), "name", None),
                "line_num": self.error.line_num,
                "message": self.error.message,
            }
        return summary
