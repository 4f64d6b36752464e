# crashiq/core/contract.py
"""
CrashIQ Decision Contract

This module defines the locked classification thresholds, heuristics and the
claim-handling texts that CrashIQ maps a classification onto.

If you change any constants in here, bump CRASHIQ_DECISION_VERSION.
"""

CRASHIQ_DECISION_VERSION = "0.1.0"

# Severity thresholds (independently overridable via config)
DEFAULT_SEVERE_G = 5.0
DEFAULT_MODERATE_G = 3.0
DEFAULT_SEVERE_SPEED_MPH = 45.0
DEFAULT_MODERATE_SPEED_MPH = 25.0

# Heuristics
AIRBAG_G_TRIGGER = 4.0  # strict >
CONFIDENCE_G_NORMALIZER = 5.0
CONFIDENCE_ACCEL_NORMALIZER = 4.0

# Telemetry below this g-force is not treated as an accident
DEFAULT_ACCIDENT_DETECTION_G = 2.5

# Narrative stage-1 call budget
DEFAULT_NARRATIVE_TIMEOUT_SEC = 10.0
DEFAULT_LLM_MODEL = "gemini-1.5-flash"

# Dispatch recommendations
DISPATCH_TEXT_SEVERE = "Dispatch tow immediately; medical facilities alerted; rental pre-arranged."
DISPATCH_TEXT_MODERATE = "Tow recommended — vehicle likely not drivable; rental info provided."
DISPATCH_TEXT_MINOR = "Vehicle appears drivable; body-shop referral provided; no tow/rental needed."

# Recommended actions (order is priority)
ACTION_REVIEW = "Review claim within 24 hours"
ACTION_SEVERE = (
    "PRIORITY: Contact driver immediately to verify welfare",
    "Assign senior adjuster for complex claim handling",
    "Request police report",
)
ACTION_MODERATE = (
    "Schedule vehicle inspection within 48 hours",
    "Follow up with driver for photos",
)
ACTION_MINOR = ("Request photos from driver via mobile app",)
ACTION_DRIVABLE = ("Provide body shop referrals to driver",)
ACTION_NOT_DRIVABLE = (
    "Confirm tow service dispatch",
    "Arrange rental car if covered",
)

# Alerts
ALERT_SPEEDING = "Driver was exceeding speed limit at time of incident"
ALERT_AIRBAG = "Airbag deployment likely - verify driver welfare"
ALERT_WEATHER_PREFIX = "Adverse weather conditions: "
ALERT_FACTORS_PREFIX = "Contributing factors identified: "
ALERT_OUTREACH_PENDING = "Awaiting driver response to wellness check"

OUTREACH_CONFIRMED_OK = "CONFIRMED_OK"
