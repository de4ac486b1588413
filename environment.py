"""Variable store used by the evaluator.

An `Environment` maps small integer variable ids to integer values. Reading
an id that was never written yields 0. Function calls never share an
environment with their caller: each invocation starts from `fresh()`.
"""

from __future__ import annotations
from typing import Dict


class Environment:
    def __init__(self) -> None:
        self.values: Dict[int, int] = {}

    @classmethod
    def fresh(cls) -> Environment:
        """Return a new, empty environment."""
        return cls()

    def get(self, var_id: int) -> int:
        """Return the value stored at `var_id`, or 0 if it was never set."""
        return self.values.get(var_id, 0)

    def set(self, var_id: int, value: int) -> int:
        """Store `value` at `var_id` and return it."""
        self.values[var_id] = value
        return value

    def bindings(self) -> Dict[int, int]:
        """Snapshot of the current bindings."""
        return dict(self.values)

    def __contains__(self, var_id: int) -> bool:
        return var_id in self.values

    def __repr__(self) -> str:
        inner = ", ".join(f"#{k}={v}" for k, v in sorted(self.values.items()))
        return f"Environment({inner})"
