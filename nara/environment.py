from typing import Any, Dict, Optional

from nara.errors import ErrorKind, runtime_error
from nara.interner import StringInterner


class Environment:
    """A scope mapping binding names to values, with a parent for lookup fallback.

    Only the root scope owns a `StringInterner`; child scopes reach it by
    walking up the chain.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}
        self.interner: Optional[StringInterner] = StringInterner() if parent is None else None

    @classmethod
    def default(cls) -> 'Environment':
        return cls()

    def store(self, name: str, value: Any):
        self.values[name] = value

    def lookup(self, name: str) -> Any:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return env.values[name]
            env = env.parent
        raise runtime_error(ErrorKind.NAME, f"binding with name '{name}' does not exist")

    def create_child(self) -> 'Environment':
        return Environment(parent=self)

    @property
    def root(self) -> 'Environment':
        env = self
        while env.parent is not None:
            env = env.parent
        return env

    def intern(self, s: str) -> str:
        return self.root.interner.intern(s)
