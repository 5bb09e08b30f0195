# core/finance/ad_revenue.py
"""
Creator ad-revenue estimators.

Both estimators are linear in views: monetized views (views x fill rate)
per thousand, times a CPM/RPM range. CPM and RPM figures are opaque inputs
(USD per 1000 monetized views), not derived here. Inputs are clamped at the
boundary: negative or NaN amounts become 0, percentages are bounded, and
zero views produce no estimate (None) rather than a row of zeros.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from core.inputs import clamp, clamp0

MONTHS_PER_YEAR = 12


# =============================================================================
# Facebook in-stream ads
# =============================================================================

@dataclass(frozen=True)
class CountryCpm:
    code: str
    name: str
    min_cpm: float
    max_cpm: float


GLOBAL_CPM = CountryCpm("GLOBAL", "Global Average", 1.5, 3.5)

COUNTRY_CPM: List[CountryCpm] = [
    # tier 1
    CountryCpm("US", "United States", 5, 10),
    CountryCpm("CA", "Canada", 4.5, 9),
    CountryCpm("GB", "United Kingdom", 4.5, 9.5),
    CountryCpm("AU", "Australia", 4, 8.5),
    CountryCpm("NZ", "New Zealand", 3.5, 8),
    CountryCpm("DE", "Germany", 3.5, 7.5),
    CountryCpm("FR", "France", 3, 7),
    CountryCpm("NL", "Netherlands", 3, 7),
    CountryCpm("SE", "Sweden", 3, 7),
    CountryCpm("NO", "Norway", 3.5, 7.5),
    CountryCpm("DK", "Denmark", 3, 7),
    CountryCpm("CH", "Switzerland", 4, 8.5),
    # europe mid-tier
    CountryCpm("IE", "Ireland", 2.5, 5.5),
    CountryCpm("IT", "Italy", 2, 4.5),
    CountryCpm("ES", "Spain", 2, 4.5),
    CountryCpm("PT", "Portugal", 2, 4.5),
    CountryCpm("BE", "Belgium", 2.2, 4.8),
    CountryCpm("AT", "Austria", 2.2, 4.8),
    CountryCpm("FI", "Finland", 2.2, 4.8),
    CountryCpm("PL", "Poland", 1.8, 3.8),
    CountryCpm("CZ", "Czech Republic", 1.8, 3.8),
    CountryCpm("GR", "Greece", 1.8, 3.8),
    CountryCpm("RO", "Romania", 1.5, 3.5),
    CountryCpm("HU", "Hungary", 1.5, 3.5),
    CountryCpm("BG", "Bulgaria", 1.3, 3.2),
    # north africa / middle east
    CountryCpm("AE", "United Arab Emirates", 2.5, 6.5),
    CountryCpm("SA", "Saudi Arabia", 2.5, 6.5),
    CountryCpm("QA", "Qatar", 2.5, 6.5),
    CountryCpm("KW", "Kuwait", 2.5, 6.5),
    CountryCpm("OM", "Oman", 2.2, 5.5),
    CountryCpm("BH", "Bahrain", 2.2, 5.5),
    CountryCpm("EG", "Egypt", 1.3, 3),
    CountryCpm("MA", "Morocco", 1.3, 3),
    CountryCpm("DZ", "Algeria", 1.3, 3),
    # latin america
    CountryCpm("BR", "Brazil", 1.3, 3.2),
    CountryCpm("MX", "Mexico", 1.3, 3.2),
    CountryCpm("AR", "Argentina", 1.2, 2.8),
    CountryCpm("CL", "Chile", 1.3, 3),
    CountryCpm("CO", "Colombia", 1.2, 2.8),
    CountryCpm("PE", "Peru", 1.2, 2.8),
    # south asia
    CountryCpm("IN", "India", 0.7, 2.2),
    CountryCpm("PK", "Pakistan", 0.6, 1.8),
    CountryCpm("BD", "Bangladesh", 0.5, 1.6),
    CountryCpm("LK", "Sri Lanka", 0.6, 1.8),
    CountryCpm("NP", "Nepal", 0.5, 1.6),
    # east & southeast asia
    CountryCpm("SG", "Singapore", 2.5, 6),
    CountryCpm("MY", "Malaysia", 1.6, 3.8),
    CountryCpm("TH", "Thailand", 1.5, 3.5),
    CountryCpm("ID", "Indonesia", 1.1, 2.7),
    CountryCpm("PH", "Philippines", 1.1, 2.7),
    CountryCpm("VN", "Vietnam", 1.1, 2.7),
    CountryCpm("JP", "Japan", 3, 7),
    CountryCpm("KR", "South Korea", 2.8, 6.5),
    CountryCpm("HK", "Hong Kong", 2.8, 6.5),
    CountryCpm("TW", "Taiwan", 2.2, 5.5),
    # africa
    CountryCpm("ZA", "South Africa", 1.3, 3.2),
    CountryCpm("NG", "Nigeria", 0.7, 2),
    CountryCpm("KE", "Kenya", 0.8, 2.1),
    CountryCpm("GH", "Ghana", 0.8, 2.1),
    CountryCpm("TZ", "Tanzania", 0.7, 2),
    # fallbacks
    CountryCpm("OTHER_HIGH", "Other (High-income country)", 2.5, 6),
    CountryCpm("OTHER_MID", "Other (Middle-income country)", 1.3, 3.5),
    CountryCpm("OTHER_LOW", "Other (Low-income country)", 0.4, 1.8),
]

_CPM_BY_CODE: Dict[str, CountryCpm] = {c.code: c for c in COUNTRY_CPM}

FACEBOOK_ADVANCED_KEY = "fb-instream-advanced-simple"
FACEBOOK_REVEAL_DELAY_MS = 600


def find_country(code: str) -> CountryCpm:
    return _CPM_BY_CODE.get(str(code or "").upper(), GLOBAL_CPM)


@dataclass(frozen=True)
class AudienceRow:
    country_code: str
    percent: float


@dataclass(frozen=True)
class FacebookEstimate:
    monetized_views: float
    monthly_min: float
    monthly_max: float
    rpm_min: Optional[float]
    rpm_max: Optional[float]

    @property
    def yearly_min(self) -> float:
        return self.monthly_min * MONTHS_PER_YEAR

    @property
    def yearly_max(self) -> float:
        return self.monthly_max * MONTHS_PER_YEAR


@dataclass(frozen=True)
class FacebookAdvancedEstimate:
    ads_monthly_min: float
    ads_monthly_max: float
    extras_monthly: float

    @property
    def total_monthly_min(self) -> float:
        return self.ads_monthly_min + self.extras_monthly

    @property
    def total_monthly_max(self) -> float:
        return self.ads_monthly_max + self.extras_monthly

    @property
    def total_yearly_min(self) -> float:
        return self.total_monthly_min * MONTHS_PER_YEAR

    @property
    def total_yearly_max(self) -> float:
        return self.total_monthly_max * MONTHS_PER_YEAR


def _creator_range(monetized_views: float, cpm: CountryCpm, share: float):
    gross_min = (monetized_views / 1000) * cpm.min_cpm
    gross_max = (monetized_views / 1000) * cpm.max_cpm
    return gross_min * share, gross_max * share


def facebook_estimate(
    monthly_views: float,
    country_code: str = "US",
    monetized_pct: float = 60,
    creator_share_pct: float = 55,
) -> Optional[FacebookEstimate]:
    views = clamp0(monthly_views)
    if views <= 0:
        return None
    monetized = views * clamp(clamp0(monetized_pct), 1, 100) / 100
    share = clamp(clamp0(creator_share_pct), 0, 100) / 100
    lo, hi = _creator_range(monetized, find_country(country_code), share)
    return FacebookEstimate(
        monetized_views=monetized,
        monthly_min=lo,
        monthly_max=hi,
        rpm_min=(lo / monetized) * 1000 if monetized > 0 else None,
        rpm_max=(hi / monetized) * 1000 if monetized > 0 else None,
    )


def facebook_advanced_estimate(
    monthly_views: float,
    audience: Iterable[AudienceRow],
    monetized_pct: float = 60,
    creator_share_pct: float = 55,
    other_placements_monthly: float = 0,
    brand_deals_monthly: float = 0,
) -> Optional[FacebookAdvancedEstimate]:
    """Audience split across countries, each row at its own CPM, plus flat extras."""
    views = clamp0(monthly_views)
    if views <= 0:
        return None
    monetized_factor = clamp(clamp0(monetized_pct), 1, 100) / 100
    share = clamp(clamp0(creator_share_pct), 0, 100) / 100

    ads_min = ads_max = 0.0
    for row in audience:
        pct = clamp(clamp0(row.percent), 0, 100)
        if pct <= 0:
            continue
        monetized = views * pct / 100 * monetized_factor
        lo, hi = _creator_range(monetized, find_country(row.country_code), share)
        ads_min += lo
        ads_max += hi

    extras = clamp0(other_placements_monthly) + clamp0(brand_deals_monthly)
    return FacebookAdvancedEstimate(ads_min, ads_max, extras)


# =============================================================================
# TikTok
# =============================================================================

TIKTOK_ADVANCED_KEY = "tiktok-revenue-advanced-mode"
TIKTOK_REVEAL_DELAY_MS = 500

REGION_MULTIPLIERS = {
    "tier1": 1.0,    # US, CA, UK, DE, AU
    "tier2": 0.7,    # Eastern Europe, LatAm, mid-income
    "tier3": 0.45,   # South Asia, Africa, low-income
}


@dataclass(frozen=True)
class TikTokEstimate:
    monetized_views: float
    monthly_min: float
    monthly_max: float
    effective_rpm_min: float
    effective_rpm_max: float

    @property
    def yearly_min(self) -> float:
        return self.monthly_min * MONTHS_PER_YEAR

    @property
    def yearly_max(self) -> float:
        return self.monthly_max * MONTHS_PER_YEAR

    @property
    def monthly_mid(self) -> float:
        return (self.monthly_min + self.monthly_max) / 2


@dataclass(frozen=True)
class TikTokAdvancedEstimate:
    quality_factor: float
    adjusted_monthly_mid: float
    extras_monthly: float

    @property
    def total_monthly(self) -> float:
        return self.adjusted_monthly_mid + self.extras_monthly

    @property
    def total_yearly(self) -> float:
        return self.total_monthly * MONTHS_PER_YEAR


def tiktok_estimate(
    monthly_views: float,
    region_tier: str = "tier1",
    monetized_pct: float = 60,
    rpm_low: float = 0.3,
    rpm_high: float = 1.2,
) -> Optional[TikTokEstimate]:
    views = clamp0(monthly_views)
    if views <= 0:
        return None
    multiplier = REGION_MULTIPLIERS.get(region_tier, 1.0)
    monetized = views * clamp(clamp0(monetized_pct), 0, 100) / 100
    monthly_min = (monetized / 1000) * clamp0(rpm_low) * multiplier
    monthly_max = (monetized / 1000) * clamp0(rpm_high) * multiplier
    return TikTokEstimate(
        monetized_views=monetized,
        monthly_min=monthly_min,
        monthly_max=monthly_max,
        effective_rpm_min=(monthly_min / views) * 1000,
        effective_rpm_max=(monthly_max / views) * 1000,
    )


def tiktok_quality_factor(avg_watch_time_s: float, engagement_rate_pct: float) -> float:
    """Planner weight, roughly 0.7-2.2; watch time bounded to 1-60 s, engagement to 0.5-50 %."""
    wt = clamp(clamp0(avg_watch_time_s), 1, 60)
    er = clamp(clamp0(engagement_rate_pct), 0.5, 50)
    return 0.7 + wt / 60 + er / 100


def tiktok_advanced_estimate(
    basic: Optional[TikTokEstimate],
    avg_watch_time_s: float = 9,
    engagement_rate_pct: float = 8,
    brand_deals_monthly: float = 0,
    affiliate_monthly: float = 0,
    live_gifts_monthly: float = 0,
) -> Optional[TikTokAdvancedEstimate]:
    if basic is None:
        return None
    qf = tiktok_quality_factor(avg_watch_time_s, engagement_rate_pct)
    extras = clamp0(brand_deals_monthly) + clamp0(affiliate_monthly) + clamp0(live_gifts_monthly)
    return TikTokAdvancedEstimate(
        quality_factor=qf,
        adjusted_monthly_mid=basic.monthly_mid * qf,
        extras_monthly=extras,
    )
