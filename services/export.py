# services/export.py
from __future__ import annotations

import csv
import html
import io
import logging
from pathlib import Path
from typing import Iterable, Mapping, Union

import pandas as pd
from PySide6.QtGui import QPageSize, QPdfWriter, QTextDocument

from core.countdown import TimerItem, to_iso
from unit_manager.units import MASS, UnitRegistry

log = logging.getLogger(__name__)


# ---------------- conversion grid ----------------

def grid_frame(results: Mapping[str, float], registry: UnitRegistry = MASS) -> pd.DataFrame:
    rows = [{"Unit": registry.display_name(k), "Value": repr(float(v))} for k, v in results.items()]
    return pd.DataFrame(rows, columns=["Unit", "Value"])


def grid_to_csv(results: Mapping[str, float], registry: UnitRegistry = MASS) -> str:
    """Unit,Value CSV with every field quoted and embedded quotes doubled."""
    return grid_frame(results, registry).to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")


def grid_clipboard_text(results: Mapping[str, float], registry: UnitRegistry = MASS) -> str:
    return "\n".join(f"{registry.display_name(k)}: {v!r}" for k, v in results.items())


def schedule_to_csv(df: pd.DataFrame, float_format: str = "%.2f") -> str:
    return df.to_csv(index=False, float_format=float_format, lineterminator="\n")


def write_text(path: Union[str, Path], text: str) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8", newline="")
    log.info("export: wrote %s", path)
    return path


# ---------------- timers ----------------

def timers_summary_text(timers: Iterable[TimerItem]) -> str:
    """Plain summary, one block per timer: title, target time, description."""
    blocks = []
    for i, t in enumerate(timers, start=1):
        lines = [f"{i}. {t.title or 'Untitled timer'}", f"   Target: {to_iso(t.target)}"]
        if t.description:
            lines.append(f"   {t.description}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def export_timers_pdf(path: Union[str, Path], timers: Iterable[TimerItem], title: str = "Countdown Timers") -> Path:
    """Render the timer summary to PDF. Needs a running QGuiApplication."""
    timers = list(timers)
    out = io.StringIO()
    out.write(f"<h2>{html.escape(title)}</h2>")
    for t in timers:
        out.write(f"<h3>{html.escape(t.title or 'Untitled timer')}</h3>")
        out.write(f"<p><b>Target:</b> {html.escape(to_iso(t.target))}</p>")
        if t.description:
            out.write(f"<p>{html.escape(t.description)}</p>")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    writer = QPdfWriter(str(path))
    writer.setPageSize(QPageSize(QPageSize.PageSizeId.A4))
    doc = QTextDocument()
    doc.setHtml(out.getvalue())
    doc.print_(writer)
    log.info("export: wrote %d timer(s) to %s", len(timers), path)
    return path
