"""Shared fixtures: a small registry, its datapoints and engines."""

import pytest

from reportspec.registry import Registry
from reportspec.engine import MetricEngine

COMMANDS = {
    "change": {
        "label": "change",
        "formula": "(current - previous) / previous * 100",
        "figure": "{value:.1f}%",
        "words": "{series} {direction} {magnitude:.1f}% on the previous {period}",
    },
    "avg_freq": {
        "label": "avg_freq",
        "formula": "current",
        "figure": "{value:.1f}",
        "words": "{series} averaged {value:.1f} a {period}",
    },
    "total": {
        "label": "total",
        "formula": "current",
        "figure": "{value:.1f}",
        "words": "{series} totalled {value:.1f} for the {period}",
    },
}

# Weekly span of 2022-02-04 is 2022-01-31..2022-02-06, quarter is Q1 2022.
#   cat_purrs: week 10 (prev week 8), quarter 130 (prev quarter 39), Jan 120
#   dog_barks: week 30 (prev week 20)
SERIES = {
    "cat_purrs": {
        "label": "cat purrs",
        "points": {
            "2021-11-15": 39,
            "2022-01-10": 72,
            "2022-01-20": 40,
            "2022-01-26": 8,
            "2022-02-01": 4,
            "2022-02-03": 6,
        },
    },
    "dog_barks": {
        "label": "dog barks",
        "points": {"2022-01-26": 20, "2022-02-02": 30},
    },
    # collide with a frequency and a command name
    "weekly": {"label": "weekly visits", "points": {"2022-02-01": 1}},
    "change": {"label": "change log", "points": {"2022-02-01": 2}},
}


@pytest.fixture
def registry():
    return Registry.build(COMMANDS, SERIES, defaults={"date": "2022-02-04"})


@pytest.fixture
def engine(registry):
    return MetricEngine(registry)


class EchoEngine:
    """Renders a selection as its string form and records every call."""

    def __init__(self):
        self.calls = []

    def evaluate(self, selection):
        self.calls.append(selection.copy())
        return str(selection)


@pytest.fixture
def echo():
    return EchoEngine()
