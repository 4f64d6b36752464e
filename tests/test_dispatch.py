from crashiq.core.contract import DISPATCH_TEXT_MINOR, DISPATCH_TEXT_MODERATE, DISPATCH_TEXT_SEVERE
from crashiq.core.dispatch import dispatch_for
from crashiq.core.models import ServiceCategory, Severity


def test_severe_dispatch():
    d = dispatch_for(Severity.SEVERE)
    assert d.vehicle_drivable is False
    assert d.ordered_categories() == [
        ServiceCategory.BODY_SHOP,
        ServiceCategory.TOW,
        ServiceCategory.HOSPITAL,
        ServiceCategory.RENTAL,
    ]
    assert d.recommendation == DISPATCH_TEXT_SEVERE


def test_moderate_dispatch():
    d = dispatch_for(Severity.MODERATE)
    assert d.vehicle_drivable is False
    assert d.service_categories == frozenset({ServiceCategory.BODY_SHOP, ServiceCategory.TOW, ServiceCategory.RENTAL})
    assert d.recommendation == DISPATCH_TEXT_MODERATE


def test_minor_dispatch():
    d = dispatch_for(Severity.MINOR)
    assert d.vehicle_drivable is True
    assert d.service_categories == frozenset({ServiceCategory.BODY_SHOP})
    assert d.recommendation == DISPATCH_TEXT_MINOR


def test_policy_invariants_hold_for_every_tier():
    for sev in Severity:
        d = dispatch_for(sev)
        assert ServiceCategory.BODY_SHOP in d.service_categories
        assert (ServiceCategory.HOSPITAL in d.service_categories) == (sev is Severity.SEVERE)
        # tow and rental exactly when not drivable
        assert (ServiceCategory.TOW in d.service_categories) == (not d.vehicle_drivable)
        assert (ServiceCategory.RENTAL in d.service_categories) == (not d.vehicle_drivable)


def test_to_dict_uses_canonical_order():
    assert dispatch_for(Severity.MODERATE).to_dict()["service_categories"] == ["BODY_SHOP", "TOW", "RENTAL"]
