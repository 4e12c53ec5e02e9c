"""
Layout Migrator — Transformation Context

Mutable state threaded through one synchronous tree walk: diagnostics in
traversal order, running counters, resolved fonts and the font-sync name map.
"""

from dataclasses import dataclass, field
from typing import Optional

from layout_migrator.config import log
from layout_migrator.fonts import ResolvedFonts
from layout_migrator.models import MigrationStats


@dataclass
class TransformContext:
    fonts: ResolvedFonts = field(default_factory=ResolvedFonts)
    font_map: Optional[dict[str, str]] = None
    warnings: list[str] = field(default_factory=list)
    stats: MigrationStats = field(default_factory=MigrationStats)
    template_id: Optional[str] = None

    def warn(self, message: str) -> None:
        """Record a non-fatal diagnostic and mirror it to the log."""
        self.warnings.append(message)
        log("WARN", "migration diagnostic", template_id=self.template_id, detail=message)
