"""
Core plugin types and dataclasses.

This module contains the shared types exchanged between the provider, its
resource/data-source plugins and the orchestrating host.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

# Externally visible attribute set of a resource, as held by the host.
ResourceState = Dict[str, Any]


class DiagnosticSeverity(Enum):
    """Severity of a diagnostic reported back to the host."""

    ERROR = "error"
    WARNING = "warning"


@dataclass
class Diagnostic:
    """A single problem reported back to the host."""

    severity: DiagnosticSeverity
    summary: str
    detail: str = ""
    attribute: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.severity.value,
            "summary": self.summary,
            "detail": self.detail,
            "attribute": self.attribute,
        }


@dataclass
class HookResult:
    """Standard result from a lifecycle hook: the new state plus diagnostics."""

    state: Optional[ResourceState] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def has_error(self) -> bool:
        return any(d.severity == DiagnosticSeverity.ERROR for d in self.diagnostics)

    def add_error(
        self, summary: str, detail: str = "", attribute: Optional[str] = None
    ) -> "HookResult":
        self.diagnostics.append(
            Diagnostic(DiagnosticSeverity.ERROR, summary, detail, attribute)
        )
        return self

    def add_warning(
        self, summary: str, detail: str = "", attribute: Optional[str] = None
    ) -> "HookResult":
        self.diagnostics.append(
            Diagnostic(DiagnosticSeverity.WARNING, summary, detail, attribute)
        )
        return self
