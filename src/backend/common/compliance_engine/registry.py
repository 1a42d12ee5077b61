"""Registry of built-in line item health checks.

Each module under `checks/` registers its `HealthCheck` class at import time;
`HealthChecker` instantiates one of each, keyed by `check_id`.
"""

from __future__ import annotations

from typing import Dict, Iterable, Type

from .check import HealthCheck


class CheckRegistry:
    def __init__(self):
        self._checks: Dict[str, Type[HealthCheck]] = {}

    def register(self, check_cls: Type[HealthCheck]) -> None:
        check_id = getattr(check_cls, "check_id", None)
        if not check_id:
            raise ValueError("Check class missing check_id")
        if check_id in self._checks:
            raise ValueError(f"Duplicate check_id registered: {check_id}")
        self._checks[check_id] = check_cls

    def create_all(self) -> list[HealthCheck]:
        return [cls() for cls in self._checks.values()]

    def get(self, check_id: str) -> Type[HealthCheck]:
        return self._checks[check_id]

    def ids(self) -> Iterable[str]:
        return self._checks.keys()


registry = CheckRegistry()


def register_check(check_cls: Type[HealthCheck]) -> Type[HealthCheck]:
    registry.register(check_cls)
    return check_cls
