# gui/pages/__init__.py

from .ad_revenue import FacebookRevenuePage, TikTokRevenuePage
from .countdown import CountdownPage
from .disclaimer import DisclaimerPage
from .inflation import InflationPage
from .mass_converter import MassConverterPage
from .recurring_deposit import RecurringDepositPage
from .retirement import RetirementPage

__all__ = [
    "CountdownPage",
    "DisclaimerPage",
    "FacebookRevenuePage",
    "InflationPage",
    "MassConverterPage",
    "RecurringDepositPage",
    "RetirementPage",
    "TikTokRevenuePage",
]
