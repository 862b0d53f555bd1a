from typing import Dict


class StringInterner:
    """Pool of strings: equal text always comes back as the same object."""
    def __init__(self):
        self.pool: Dict[str, str] = {}

    def intern(self, s: str) -> str:
        return self.pool.setdefault(s, s)

    def __len__(self) -> int:
        return len(self.pool)

    def __contains__(self, s: str) -> bool:
        return s in self.pool
