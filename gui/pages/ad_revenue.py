# gui/pages/ad_revenue.py
from __future__ import annotations

import logging
from typing import List, Tuple

from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDoubleSpinBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QVBoxLayout,
    QWidget,
)

from core.finance.ad_revenue import (
    COUNTRY_CPM,
    FACEBOOK_ADVANCED_KEY,
    FACEBOOK_REVEAL_DELAY_MS,
    GLOBAL_CPM,
    REGION_MULTIPLIERS,
    TIKTOK_ADVANCED_KEY,
    TIKTOK_REVEAL_DELAY_MS,
    AudienceRow,
    facebook_advanced_estimate,
    facebook_estimate,
    tiktok_advanced_estimate,
    tiktok_estimate,
)
from core.formatting import format_money, format_payout
from core.scheduling import DelayedAction
from services.persistence import PreferenceStore
from gui.widgets import number_edit, read_number, result_label

log = logging.getLogger(__name__)

AUDIENCE_ROWS = 3
REGION_LABELS = {
    "tier1": "Tier 1 (US, CA, UK, DE, AU)",
    "tier2": "Tier 2 (E. Europe, LatAm)",
    "tier3": "Tier 3 (S. Asia, Africa)",
}


def _country_combo(code: str = "US") -> QComboBox:
    combo = QComboBox()
    for c in [GLOBAL_CPM, *COUNTRY_CPM]:
        combo.addItem(c.name, c.code)
    combo.setCurrentIndex(max(combo.findData(code), 0))
    return combo


def _pct_spin(value: float, lo: float = 0.0, hi: float = 100.0) -> QDoubleSpinBox:
    s = QDoubleSpinBox()
    s.setRange(lo, hi)
    s.setDecimals(1)
    s.setSuffix(" %")
    s.setValue(value)
    return s


def _range(lo: float, hi: float) -> str:
    return f"{format_money(lo)} – {format_money(hi)}"


class AdvancedSection(QWidget):
    """
    Opt-in advanced panel. The checkbox state is persisted as a "1"/"0"
    flag; switching it on reveals the panel after a short delay, switching
    it off hides it at once and cancels any pending reveal.
    """

    def __init__(self, store: PreferenceStore | None, key: str, delay_ms: int, body: QWidget, parent=None):
        super().__init__(parent)
        self.store = store
        self.key = key
        self.body = body
        self.toggle = QCheckBox("Advanced mode")
        self.reveal = DelayedAction(delay_ms, self)

        lay = QVBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(self.toggle)
        lay.addWidget(body)

        enabled = store.load_flag(key) if store is not None else False
        self.toggle.setChecked(enabled)
        body.setVisible(enabled)
        self.toggle.toggled.connect(self._on_toggled)

    def _on_toggled(self, checked: bool) -> None:
        if self.store is not None:
            self.store.save_flag(self.key, checked)
        if checked:
            self.reveal.start(lambda: self.body.setVisible(True))
        else:
            self.reveal.cancel()
            self.body.setVisible(False)


# ---------------------------------------------------------------------------
# Facebook
# ---------------------------------------------------------------------------

class FacebookRevenuePage(QWidget):
    def __init__(self, store: PreferenceStore | None = None, parent=None):
        super().__init__(parent)

        basic = QGroupBox("Facebook In-Stream Ads")
        form = QFormLayout(basic)
        self.views = number_edit("100000", decimals=0)
        self.country = _country_combo("US")
        self.monetized = _pct_spin(60, 1, 100)
        self.share = _pct_spin(55)
        form.addRow(QLabel("Monthly views:"), self.views)
        form.addRow(QLabel("Main audience:"), self.country)
        form.addRow(QLabel("Monetized views:"), self.monetized)
        form.addRow(QLabel("Creator share:"), self.share)

        self.monthly_label = result_label()
        self.yearly_label = result_label()
        self.rpm_label = result_label()
        form.addRow(QLabel("Monthly earnings:"), self.monthly_label)
        form.addRow(QLabel("Yearly earnings:"), self.yearly_label)
        form.addRow(QLabel("RPM:"), self.rpm_label)

        # ---- advanced ----
        adv_body = QGroupBox("Audience Split & Extras")
        adv_form = QFormLayout(adv_body)
        self.audience: List[Tuple[QComboBox, QDoubleSpinBox]] = []
        for code, pct in (("US", 50.0), ("IN", 30.0), ("GB", 20.0))[:AUDIENCE_ROWS]:
            row = QHBoxLayout()
            combo, spin = _country_combo(code), _pct_spin(pct)
            row.addWidget(combo, 1)
            row.addWidget(spin)
            adv_form.addRow(row)
            self.audience.append((combo, spin))
        self.other_placements = number_edit("0")
        self.brand_deals = number_edit("0")
        adv_form.addRow(QLabel("Other placements / month:"), self.other_placements)
        adv_form.addRow(QLabel("Brand deals / month:"), self.brand_deals)
        self.adv_monthly_label = result_label()
        self.adv_yearly_label = result_label()
        adv_form.addRow(QLabel("Total monthly:"), self.adv_monthly_label)
        adv_form.addRow(QLabel("Total yearly:"), self.adv_yearly_label)
        self.advanced = AdvancedSection(store, FACEBOOK_ADVANCED_KEY, FACEBOOK_REVEAL_DELAY_MS, adv_body)

        lay = QVBoxLayout(self)
        lay.addWidget(basic)
        lay.addWidget(self.advanced)
        lay.addStretch()

        for edit in (self.views, self.other_placements, self.brand_deals):
            edit.textChanged.connect(self.recalculate)
        for spin in (self.monetized, self.share, *(s for _, s in self.audience)):
            spin.valueChanged.connect(self.recalculate)
        for combo in (self.country, *(c for c, _ in self.audience)):
            combo.currentIndexChanged.connect(self.recalculate)
        self.recalculate()

    def recalculate(self) -> None:
        views = read_number(self.views)
        est = facebook_estimate(views, self.country.currentData(), self.monetized.value(), self.share.value())
        if est is None:
            for lab in (self.monthly_label, self.yearly_label, self.rpm_label):
                lab.setText("—")
        else:
            self.monthly_label.setText(_range(est.monthly_min, est.monthly_max))
            self.yearly_label.setText(_range(est.yearly_min, est.yearly_max))
            self.rpm_label.setText(f"{format_payout(est.rpm_min)} – {format_payout(est.rpm_max)}")

        adv = facebook_advanced_estimate(
            views,
            [AudienceRow(c.currentData(), s.value()) for c, s in self.audience],
            self.monetized.value(),
            self.share.value(),
            read_number(self.other_placements),
            read_number(self.brand_deals),
        )
        if adv is None:
            self.adv_monthly_label.setText("—")
            self.adv_yearly_label.setText("—")
        else:
            self.adv_monthly_label.setText(_range(adv.total_monthly_min, adv.total_monthly_max))
            self.adv_yearly_label.setText(_range(adv.total_yearly_min, adv.total_yearly_max))


# ---------------------------------------------------------------------------
# TikTok
# ---------------------------------------------------------------------------

class TikTokRevenuePage(QWidget):
    def __init__(self, store: PreferenceStore | None = None, parent=None):
        super().__init__(parent)

        basic = QGroupBox("TikTok Creator Revenue")
        form = QFormLayout(basic)
        self.views = number_edit("1000000", decimals=0)
        self.region = QComboBox()
        for tier in REGION_MULTIPLIERS:
            self.region.addItem(REGION_LABELS.get(tier, tier), tier)
        self.monetized = _pct_spin(60)
        self.rpm_low = number_edit("0.3", 0.0, 1000.0)
        self.rpm_high = number_edit("1.2", 0.0, 1000.0)
        form.addRow(QLabel("Monthly views:"), self.views)
        form.addRow(QLabel("Audience region:"), self.region)
        form.addRow(QLabel("Monetized views:"), self.monetized)
        form.addRow(QLabel("RPM low ($):"), self.rpm_low)
        form.addRow(QLabel("RPM high ($):"), self.rpm_high)

        self.monthly_label = result_label()
        self.yearly_label = result_label()
        self.rpm_label = result_label()
        form.addRow(QLabel("Monthly earnings:"), self.monthly_label)
        form.addRow(QLabel("Yearly earnings:"), self.yearly_label)
        form.addRow(QLabel("Effective RPM:"), self.rpm_label)

        adv_body = QGroupBox("Engagement & Extras")
        adv_form = QFormLayout(adv_body)
        self.watch_time = QDoubleSpinBox()
        self.watch_time.setRange(1, 60)
        self.watch_time.setSuffix(" s")
        self.watch_time.setValue(9)
        self.engagement = _pct_spin(8, 0.5, 50)
        self.brand_deals = number_edit("0")
        self.affiliate = number_edit("0")
        self.live_gifts = number_edit("0")
        adv_form.addRow(QLabel("Avg. watch time:"), self.watch_time)
        adv_form.addRow(QLabel("Engagement rate:"), self.engagement)
        adv_form.addRow(QLabel("Brand deals / month:"), self.brand_deals)
        adv_form.addRow(QLabel("Affiliate / month:"), self.affiliate)
        adv_form.addRow(QLabel("LIVE gifts / month:"), self.live_gifts)
        self.quality_label = result_label()
        self.adv_monthly_label = result_label()
        self.adv_yearly_label = result_label()
        adv_form.addRow(QLabel("Quality factor:"), self.quality_label)
        adv_form.addRow(QLabel("Total monthly:"), self.adv_monthly_label)
        adv_form.addRow(QLabel("Total yearly:"), self.adv_yearly_label)
        self.advanced = AdvancedSection(store, TIKTOK_ADVANCED_KEY, TIKTOK_REVEAL_DELAY_MS, adv_body)

        lay = QVBoxLayout(self)
        lay.addWidget(basic)
        lay.addWidget(self.advanced)
        lay.addStretch()

        for edit in (self.views, self.rpm_low, self.rpm_high, self.brand_deals, self.affiliate, self.live_gifts):
            edit.textChanged.connect(self.recalculate)
        for spin in (self.monetized, self.watch_time, self.engagement):
            spin.valueChanged.connect(self.recalculate)
        self.region.currentIndexChanged.connect(self.recalculate)
        self.recalculate()

    def recalculate(self) -> None:
        est = tiktok_estimate(
            read_number(self.views),
            self.region.currentData(),
            self.monetized.value(),
            read_number(self.rpm_low),
            read_number(self.rpm_high),
        )
        if est is None:
            for lab in (self.monthly_label, self.yearly_label, self.rpm_label):
                lab.setText("—")
        else:
            self.monthly_label.setText(_range(est.monthly_min, est.monthly_max))
            self.yearly_label.setText(_range(est.yearly_min, est.yearly_max))
            self.rpm_label.setText(f"{format_payout(est.effective_rpm_min)} – {format_payout(est.effective_rpm_max)}")

        adv = tiktok_advanced_estimate(
            est,
            self.watch_time.value(),
            self.engagement.value(),
            read_number(self.brand_deals),
            read_number(self.affiliate),
            read_number(self.live_gifts),
        )
        if adv is None:
            for lab in (self.quality_label, self.adv_monthly_label, self.adv_yearly_label):
                lab.setText("—")
        else:
            self.quality_label.setText(f"×{adv.quality_factor:.2f}")
            self.adv_monthly_label.setText(format_money(adv.total_monthly))
            self.adv_yearly_label.setText(format_money(adv.total_yearly))
