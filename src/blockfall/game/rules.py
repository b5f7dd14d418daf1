from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringRules:
    line_clear_points: int = 10
    levels_per_line: int = 1
    landing_points: int = 1
    # Award the landing point on locks that also clear rows.
    landing_on_clear: bool = True

    def score_for_lines(self, lines: int) -> int:
        return max(0, lines) * self.line_clear_points

    def levels_for_lines(self, lines: int) -> int:
        return max(0, lines) * self.levels_per_line

    def score_for_landing(self, lines: int, ended: bool) -> int:
        if ended:
            return 0
        if lines > 0 and not self.landing_on_clear:
            return 0
        return self.landing_points
