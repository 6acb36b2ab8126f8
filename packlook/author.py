from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Pattern

# "Name <email> <epoch seconds> <+hhmm|-hhmm>"
IDENT_LINE: Pattern[str] = re.compile(r"^(.*?)\s*<([^<>]*)>\s*(-?\d+)\s+([+-])(\d{2})(\d{2})$")


class Author:
    """The identity and timestamp on an author or committer header."""

    def __init__(self, name: str, email: str, time: datetime) -> None:
        self.name: str = name
        self.email: str = email
        self.time: datetime = time

    @classmethod
    def parse(cls, string: str) -> Author | None:
        """Returns None for identity lines git itself would not write."""
        m = IDENT_LINE.match(string.strip())
        if m is None:
            return None

        name, email, epoch, sign, hours, minutes = m.groups()
        offset = timedelta(hours=int(hours), minutes=int(minutes))
        try:
            tz = timezone(-offset if sign == "-" else offset)
            time = datetime.fromtimestamp(int(epoch), tz)
        except (ValueError, OverflowError, OSError):
            return None

        return cls(name, email, time)

    def __str__(self) -> str:
        epoch = int(self.time.timestamp())
        return f"{self.name} <{self.email}> {epoch} {self.time.strftime('%z')}"
