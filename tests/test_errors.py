"""Tests for the error taxonomy."""

import pytest

from dep_inspector.errors import (
    BuildFailure,
    ConfigurationError,
    CycleDetected,
    DepInspectorError,
    EmptyRootSet,
    GraphResolutionFailure,
    InconsistentRegistry,
)


@pytest.mark.parametrize(
    "error_cls, stage",
    [
        (ConfigurationError, "configure"),
        (GraphResolutionFailure, "resolve graph"),
        (EmptyRootSet, "resolve roots"),
        (InconsistentRegistry, "attribute importers"),
        (BuildFailure, "build"),
    ],
)
def test_stage(error_cls, stage):
    error = error_cls("boom")
    assert isinstance(error, DepInspectorError)
    assert error.stage == stage


def test_cycle_message():
    error = CycleDetected([("a", "b"), ("b", "a")])
    assert error.stage == "compute closures"
    assert error.cycle == [("a", "b"), ("b", "a")]
    assert str(error) == "dependency cycle detected: a -> b -> a"
