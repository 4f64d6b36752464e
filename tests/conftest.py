import pandas as pd
import pytest

from crashiq.core.models import TelemetrySample


@pytest.fixture
def frontal_sample() -> TelemetrySample:
    """Moderate frontal impact at the speed limit (g=4.2, x=-3.8)."""
    return TelemetrySample(
        g_force=4.2,
        speed_mph=35.0,
        speed_limit_mph=35,
        accel_x=-3.8,
        accel_y=0.5,
        accel_z=0.2,
    )


@pytest.fixture
def events_df() -> pd.DataFrame:
    """
    Canonical event schema matching load_events_csv():
      event_id, g_force, speed_mph, speed_limit_mph, accel_x, accel_y, accel_z
    plus the optional context columns.
    """
    return pd.DataFrame(
        {
            "event_id": ["EVT-A", "EVT-B", "EVT-C", "EVT-D"],
            "g_force": [4.2, 6.2, 1.0, 2.8],
            "speed_mph": [35.0, 55.0, 5.0, 15.0],
            "speed_limit_mph": [35, 55, 25, 35],
            "accel_x": [-3.8, -8.5, 0.1, 2.5],
            "accel_y": [0.5, 0.2, 0.1, 0.3],
            "accel_z": [0.2, 0.1, 0.1, 0.2],
            "precipitation": ["Rain", None, None, None],
            "contributing_factors": ["Wet road surface;Low visibility", None, None, None],
            "outreach_status": ["PENDING", "CONFIRMED_OK", None, None],
        }
    )


@pytest.fixture
def events_csv(tmp_path, events_df):
    p = tmp_path / "events.csv"
    events_df.to_csv(p, index=False)
    return p
