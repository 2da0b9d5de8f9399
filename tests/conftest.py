"""Shared fixtures for wikipull tests."""

import pytest
from pages import FULL_BODY, FULL_CHROME, wiki_page


@pytest.fixture
def full_page() -> str:
    """A realistic page exercising every component kind."""
    return wiki_page(FULL_BODY, chrome=FULL_CHROME)


@pytest.fixture
def scenario_a_page() -> str:
    return wiki_page('<h2 id="x">Intro</h2><p>hello</p>')


class FakeClock:
    """Manually advanced clock for cache tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
