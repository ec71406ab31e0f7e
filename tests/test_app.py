from __future__ import annotations

from pathlib import Path

import pandas as pd
from streamlit.testing.v1 import AppTest

APP_PATH = Path(__file__).resolve().parent.parent / "app.py"


def test_dashboard_starts_without_a_dataset():
    at = AppTest.from_file(str(APP_PATH), default_timeout=30).run()

    assert not at.exception
    assert "Upload a saved calendar" in at.info[0].value

    year = next(widget for widget in at.text_input if widget.label == "Year")
    assert year.value == str(pd.Timestamp.now(tz="UTC").year)
