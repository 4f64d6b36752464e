import pytest

from crashiq.core.impact import IMPACT_RULES, detect_impact_type, match_impact_rule
from crashiq.core.models import ImpactType


def test_rule_order_is_fixed():
    assert [r.name for r in IMPACT_RULES] == [
        "rollover",
        "t_bone",
        "head_on",
        "frontal",
        "rear_ended",
        "side_swipe",
    ]


@pytest.mark.parametrize(
    "accel, rule, expected",
    [
        ((0.2, 0.3, 7.0), "rollover", ImpactType.ROLLOVER),
        ((-2.5, 1.8, 7.2), "rollover", ImpactType.ROLLOVER),
        ((1.0, 1.0, 4.5), "rollover", ImpactType.ROLLOVER),
        ((-1.5, 7.2, 0.9), "t_bone", ImpactType.SIDE),
        ((-10.5, 0.8, 1.2), "head_on", ImpactType.FRONTAL),
        ((-4.2, 0.6, 0.8), "frontal", ImpactType.FRONTAL),
        ((4.5, 0.3, 0.5), "rear_ended", ImpactType.REAR),
        ((-0.8, 2.8, 0.4), "side_swipe", ImpactType.SIDE),
    ],
)
def test_each_rule_in_isolation(accel, rule, expected):
    assert match_impact_rule(*accel) == rule
    assert detect_impact_type(*accel) is expected


def test_rollover_beats_every_other_rule():
    # Also qualifies for head-on and t-bone, but rollover is evaluated first.
    assert detect_impact_type(-9.0, 5.0, 6.5) is ImpactType.ROLLOVER


def test_vertical_above_four_needs_to_dominate_for_rollover():
    # |z| > 4 but not 1.5x the longitudinal axis: falls through to frontal.
    assert match_impact_rule(-4.0, 0.5, 5.0) == "frontal"


def test_t_bone_beats_head_on():
    assert match_impact_rule(-3.0, 5.0, 0.0) == "t_bone"
    # |y| not 1.5x |x| so the t-bone rule does not fire
    assert match_impact_rule(-8.0, 5.0, 0.0) == "head_on"


def test_frontal_boundary_at_minus_three_point_five():
    assert match_impact_rule(-3.5, 0.2, 0.1) != "frontal"
    assert detect_impact_type(-3.5, 0.2, 0.1) is ImpactType.FRONTAL  # dominant-axis fallback
    assert match_impact_rule(-3.5, 0.2, 0.1) == "dominant_axis"
    assert match_impact_rule(-3.51, 0.2, 0.1) == "frontal"


def test_rear_ended_boundary():
    assert match_impact_rule(1.5, 0.2, 0.1) == "dominant_axis"
    assert detect_impact_type(1.5, 0.2, 0.1) is ImpactType.REAR
    assert match_impact_rule(1.51, 0.2, 0.1) == "rear_ended"


def test_dominant_axis_fallback_for_small_forces():
    assert detect_impact_type(-1.0, 0.2, 0.1) is ImpactType.FRONTAL
    assert detect_impact_type(1.0, 0.2, 0.1) is ImpactType.REAR
    assert detect_impact_type(0.2, 1.2, 0.1) is ImpactType.SIDE


@pytest.mark.parametrize(
    "accel",
    [
        (0.0, 0.0, 0.0),
        (1.0, 1.0, 0.0),
        (1.0, -1.0, 0.5),
        (1.0, 0.0, 1.0),
    ],
)
def test_ties_are_unknown(accel):
    assert detect_impact_type(*accel) is ImpactType.UNKNOWN
    assert match_impact_rule(*accel) == "unknown"


def test_dominant_vertical_below_rollover_threshold_is_unknown():
    assert detect_impact_type(0.5, 0.5, 3.0) is ImpactType.UNKNOWN


def test_detector_is_total_for_a_grid_of_inputs():
    values = [-12.0, -7.0, -3.5, -1.5, 0.0, 1.5, 4.5, 7.0]
    for x in values:
        for y in values:
            for z in values:
                assert isinstance(detect_impact_type(x, y, z), ImpactType)
