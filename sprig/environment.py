from typing import Any, Dict, Optional


class Environment:
    """One scope: a mapping of names to values plus a link to the enclosing scope.

    Scopes form a chain rooted at the global scope. Closures hold a
    reference to the scope they were declared in, never a copy, so a
    change made through one reference is seen through every other.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any) -> None:
        # redefining in the same scope replaces the old binding
        self.values[name] = value

    def get(self, name: str) -> Optional[Any]:
        """Return the innermost binding of ``name``, or None if no scope defines it."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return env.values[name]
            env = env.parent
        return None

    def assign(self, name: str, value: Any) -> bool:
        """Rebind the innermost existing ``name``.

        Returns False, and changes nothing, when no scope in the chain
        defines the name; undeclared names are never created here.
        """
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                env.values[name] = value
                return True
            env = env.parent
        return False

    def __contains__(self, name: str) -> bool:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return True
            env = env.parent
        return False

    def depth(self) -> int:
        count = 0
        env = self.parent
        while env is not None:
            count += 1
            env = env.parent
        return count
