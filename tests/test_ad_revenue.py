# tests/test_ad_revenue.py

import math

import pytest

from core.finance.ad_revenue import (
    GLOBAL_CPM,
    AudienceRow,
    facebook_advanced_estimate,
    facebook_estimate,
    find_country,
    tiktok_advanced_estimate,
    tiktok_estimate,
    tiktok_quality_factor,
)


# ---------------- Facebook ----------------

def test_facebook_basic_us():
    est = facebook_estimate(100_000, "US", 60, 55)
    assert est.monetized_views == 60_000
    assert est.monthly_min == pytest.approx(165.0)
    assert est.monthly_max == pytest.approx(330.0)
    assert est.yearly_max == pytest.approx(3960.0)
    assert est.rpm_min == pytest.approx(2.75)
    assert est.rpm_max == pytest.approx(5.5)


def test_unknown_country_uses_global_average():
    assert find_country("zz") is GLOBAL_CPM
    assert find_country("us").code == "US"
    est = facebook_estimate(1000, "ZZ", 100, 100)
    assert est.monthly_min == pytest.approx(1.5)


@pytest.mark.parametrize("views", [0, -10, math.nan, None])
def test_facebook_no_views_no_estimate(views):
    assert facebook_estimate(views) is None


def test_facebook_monetized_share_is_bounded():
    assert facebook_estimate(1000, "US", 0, 55).monetized_views == pytest.approx(10)
    assert facebook_estimate(1000, "US", 250, 55).monetized_views == pytest.approx(1000)


def test_facebook_advanced_audience_split():
    est = facebook_advanced_estimate(
        100_000,
        [AudienceRow("US", 50), AudienceRow("IN", 50), AudienceRow("GB", 0)],
        60, 55,
        other_placements_monthly=100, brand_deals_monthly=50,
    )
    assert est.ads_monthly_min == pytest.approx(94.05)
    assert est.ads_monthly_max == pytest.approx(201.3)
    assert est.total_monthly_min == pytest.approx(244.05)
    assert est.total_yearly_max == pytest.approx((201.3 + 150) * 12)


def test_facebook_advanced_negative_extras_clamp():
    est = facebook_advanced_estimate(1000, [], brand_deals_monthly=-500)
    assert est.extras_monthly == 0 and est.total_monthly_max == 0


# ---------------- TikTok ----------------

def test_tiktok_basic():
    est = tiktok_estimate(1_000_000, "tier1", 60, 0.3, 1.2)
    assert est.monthly_min == pytest.approx(180.0)
    assert est.monthly_max == pytest.approx(720.0)
    assert est.effective_rpm_min == pytest.approx(0.18)
    assert est.yearly_max == pytest.approx(8640.0)


def test_tiktok_region_multiplier():
    assert tiktok_estimate(1_000_000, "tier3", 60).monthly_min == pytest.approx(81.0)
    assert tiktok_estimate(1_000_000, "mars", 60).monthly_min == pytest.approx(180.0)


def test_tiktok_no_views():
    assert tiktok_estimate(0) is None
    assert tiktok_advanced_estimate(None) is None


def test_quality_factor_bounds():
    assert tiktok_quality_factor(9, 8) == pytest.approx(0.93)
    assert tiktok_quality_factor(500, 500) == pytest.approx(2.2)
    assert tiktok_quality_factor(0, 0) == pytest.approx(0.7 + 1 / 60 + 0.005)


def test_tiktok_advanced():
    basic = tiktok_estimate(1_000_000, "tier1", 60, 0.3, 1.2)
    adv = tiktok_advanced_estimate(basic, 9, 8, brand_deals_monthly=100, live_gifts_monthly=50)
    assert adv.adjusted_monthly_mid == pytest.approx(418.5)
    assert adv.total_monthly == pytest.approx(568.5)
    assert adv.total_yearly == pytest.approx(6822.0)
