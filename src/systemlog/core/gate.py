from __future__ import annotations

"""
Severity Gate.

Decides, per record, whether it is emitted at all and whether it is
forwarded to the file sink.
"""

from systemlog.domain.levels import Level


class SeverityGate:
    """
    Filter records by the configured level.

    A configured level N emits every record with ordinal <= N (higher numbers
    are more verbose). ALERT is never suppressed. WARNING and ALERT are always
    persisted; INFO and DEBUG only when persist_all is set.
    """

    def __init__(self, level: Level, persist_all: bool = False) -> None:
        self.level = Level(level)
        self.persist_all = persist_all

    def emits(self, level: Level) -> bool:
        return level is Level.ALERT or level <= self.level

    def persists(self, level: Level) -> bool:
        if not self.emits(level):
            return False
        if level <= Level.WARNING:
            return True
        return self.persist_all

    def __repr__(self) -> str:
        return f"SeverityGate(level={self.level.name}, persist_all={self.persist_all})"
