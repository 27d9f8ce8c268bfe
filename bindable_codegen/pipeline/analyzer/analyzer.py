"""
Binding analyzer.

Phase 2 of the pipeline: scan, extract and resolve. A type whose extraction
or resolution fails unexpectedly is logged and dropped; the run continues
with the others.
"""

from __future__ import annotations

import structlog

from .extractor import MemberExtractor
from .ir_nodes import TypeDescriptor
from .resolver import InheritanceResolver
from .scanner import TypeScanner
from .session import GenerationSession

logger = structlog.get_logger()


class BindingAnalyzer:
    """Runs the analysis phases over a session."""

    def __init__(self, session: GenerationSession):
        self.session = session

    def analyze(self) -> list[TypeDescriptor]:
        """
        Analyze the session's declarations.

        Returns:
            Resolved type descriptors, ancestors first
        """
        TypeScanner(self.session).scan()

        extractor = MemberExtractor(self.session)
        for type_desc in list(self.session.types.values()):
            self._isolated("extract", type_desc, extractor.extract)

        resolver = InheritanceResolver(self.session)
        self.session.resolution_order = resolver.resolution_order()
        for name in self.session.resolution_order:
            type_desc = self.session.types.get(name)
            if type_desc is not None:
                self._isolated("resolve", type_desc, resolver.resolve)

        resolved = self.session.resolved_types()
        logger.debug("analysis_complete", types=[t.full_name for t in resolved], enums=len(self.session.enums))
        return resolved

    def _isolated(self, phase: str, type_desc: TypeDescriptor, action) -> None:
        try:
            action(type_desc)
        except Exception:
            logger.error("type_failed", phase=phase, type_name=type_desc.full_name, exc_info=True)
            self.session.types.pop(type_desc.full_name, None)
            self.session.omitted.append(type_desc.full_name)
