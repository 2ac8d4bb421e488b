from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_points: int = 100
    base_interval_ms: int = 1000
    interval_step_ms: int = 100
    points_per_level: int = 1000
    min_interval_ms: int = 100

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        return lines * self.line_clear_points

    def level(self, score: int) -> int:
        return score // self.points_per_level

    def drop_interval(self, score: int) -> int:
        """Milliseconds between gravity ticks; shrinks every level, floored."""
        interval = self.base_interval_ms - self.level(score) * self.interval_step_ms
        return max(self.min_interval_ms, interval)
