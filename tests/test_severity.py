import pytest

from crashiq.core.config import Thresholds
from crashiq.core.models import Severity
from crashiq.core.severity import classify_severity


@pytest.mark.parametrize(
    "g, speed, expected",
    [
        (0.0, 0.0, Severity.MINOR),
        (2.99, 24.9, Severity.MINOR),
        (3.0, 0.0, Severity.MODERATE),
        (0.0, 25.0, Severity.MODERATE),
        (4.99, 44.9, Severity.MODERATE),
        (5.0, 0.0, Severity.SEVERE),
        (0.0, 45.0, Severity.SEVERE),
    ],
)
def test_threshold_boundaries_are_inclusive(g, speed, expected):
    assert classify_severity(g, speed) is expected


def test_speed_alone_can_make_an_event_severe():
    # Near-zero g-force at highway speed is still SEVERE: either signal suffices.
    assert classify_severity(0.1, 70.0) is Severity.SEVERE


def test_severity_is_monotonic_in_g_and_speed():
    prev = Severity.MINOR
    for g in [0.0, 1.0, 2.9, 3.0, 4.0, 5.0, 8.0]:
        sev = classify_severity(g, 10.0)
        assert sev.rank >= prev.rank
        prev = sev

    prev = Severity.MINOR
    for speed in [0.0, 10.0, 25.0, 30.0, 45.0, 80.0]:
        sev = classify_severity(1.0, speed)
        assert sev.rank >= prev.rank
        prev = sev


def test_custom_thresholds_are_honoured():
    strict = Thresholds(severe_g=8.0, moderate_g=6.0, severe_speed=90.0, moderate_speed=70.0)
    assert classify_severity(5.5, 50.0, strict) is Severity.MINOR
    assert classify_severity(6.0, 50.0, strict) is Severity.MODERATE
    assert classify_severity(1.0, 90.0, strict) is Severity.SEVERE
