"""Shared fixtures for FakeHuman tests."""

from __future__ import annotations

from typing import Iterable

import pytest

from fakehuman.config import Config
from fakehuman.pseudo_random import PseudoRandom


class ScriptedRandom(PseudoRandom):
    """PseudoRandom whose ``chance`` answers are scripted (False once exhausted).

    Integer draws still come from the seeded stream so sampling works normally.
    """

    def __init__(self, chances: Iterable[bool] = (), seed: int = 7):
        super().__init__(seed)
        self.chances = list(chances)
        self.chance_calls = []

    def chance(self, odds: int) -> bool:
        self.chance_calls.append(odds)
        if self.chances:
            return self.chances.pop(0)
        return False


@pytest.fixture
def scripted_random():
    """Factory: ``scripted_random(chances=[True, False])``."""

    def make(chances: Iterable[bool] = (), seed: int = 7) -> ScriptedRandom:
        return ScriptedRandom(chances, seed)

    return make


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # Keep captured output free of ANSI codes and decision traces
    monkeypatch.setattr(Config, "NO_COLOR", True)
    monkeypatch.setattr(Config, "VERBOSE", False)
    monkeypatch.delenv("FAKEHUMAN_VERBOSE", raising=False)
