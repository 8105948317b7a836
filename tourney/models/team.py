from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Team:
    id: str
    name: str
    short_name: Optional[str] = None
    level: Optional[str] = None

    def __str__(self):
        return self.short_name or self.name
