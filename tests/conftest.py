from __future__ import annotations

from typing import Callable, Dict, List, Tuple

import pytest


class FakeGitConfig:
    """Stand-in for ``read_git_config`` that answers from a scope -> value map."""

    def __init__(self, values: Dict[str, str] | None = None) -> None:
        self.values = values or {}
        self.calls: List[Tuple[str, str]] = []

    def __call__(self, scope: str, key: str = "user.name") -> str:
        self.calls.append((scope, key))
        return self.values.get(scope, "")


@pytest.fixture
def git_config() -> Callable[..., FakeGitConfig]:
    def factory(**values: str) -> FakeGitConfig:
        return FakeGitConfig(values)

    return factory
