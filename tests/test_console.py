from datetime import datetime, timezone

import pytest

from price_predictor.schemas import AppState, Prediction, PriceSample, Screen
from price_predictor.ui.console import format_percent, format_usd


@pytest.mark.parametrize("value, expected", [
    (31.5, "$31.50"),
    (0.004, "$0.00"),
    (1234567.891, "$1,234,567.89"),
    (None, "$--"),
])
def test_format_usd(value, expected):
    assert format_usd(value) == expected


@pytest.mark.parametrize("percent, expected", [
    (8.5312, "+8.53%"),
    (3000.0, "+3000.00%"),
    (None, "+--%"),
])
def test_format_percent(percent, expected):
    assert format_percent(percent) == expected


def price(value):
    return PriceSample(value=value, observed_at=datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc))


def test_main_view_while_loading(ui, buckets, output):
    ui.console.print(ui.build_view(AppState(), buckets))
    text = output.getvalue()
    assert "EGLD Price" in text
    assert "Live from CoinGecko" in text
    assert "Loading..." in text
    assert "Next Week" not in text


def test_main_view_error_before_first_price(ui, buckets, output):
    state = AppState(error="Could not fetch EGLD price.")
    ui.console.print(ui.build_view(state, buckets))
    text = output.getvalue()
    assert "Could not fetch EGLD price." in text
    assert "Tomorrow" not in text


def test_main_view_lists_price_and_timeframes(ui, buckets, output):
    ui.console.print(ui.build_view(AppState(price=price(1234.5)), buckets))
    text = output.getvalue()
    assert "$1,234.50" in text
    assert "Last updated:" in text
    for label in ("Tomorrow", "Next Week", "Next Month", "Next Year"):
        assert label in text


def test_main_view_marks_stale_price(ui, buckets, output):
    state = AppState(price=price(20.0), error="Could not fetch EGLD price.")
    ui.console.print(ui.build_view(state, buckets))
    text = output.getvalue()
    assert "$20.00" in text
    assert "Showing last known price." in text


def test_prediction_view(ui, buckets, output):
    state = AppState(
        screen=Screen.PREDICTION,
        price=price(100.0),
        selected_bucket="week",
        prediction=Prediction(bucket_key="week", base_price=100.0, percent=28.456, predicted_price=128.456),
    )
    ui.console.print(ui.build_view(state, buckets))
    text = output.getvalue()
    assert "Estimated price next week:" in text
    assert "$128.46" in text
    assert "(+28.46%)" in text
    assert "AI generated price" in text


def test_prediction_view_without_prediction_shows_placeholders(ui, buckets, output):
    state = AppState(screen=Screen.PREDICTION, selected_bucket="tomorrow")
    ui.console.print(ui.build_view(state, buckets))
    text = output.getvalue()
    assert "$--" in text
    assert "(+--%)" in text


def test_prompt_text(ui):
    assert ui.prompt_text(AppState(), 4) == "[q] Quit"
    assert ui.prompt_text(AppState(price=price(1.0)), 4).startswith("[1-4]")
    assert "Reselect" in ui.prompt_text(AppState(screen=Screen.PREDICTION), 4)


def test_render_prints_banner_and_view(ui, buckets, output, capsys):
    ui.render(AppState(price=price(2.0)), buckets)
    assert "EGLD AI PRICE PREDICTOR" in capsys.readouterr().out
    assert "$2.00" in output.getvalue()


def test_render_disabled(ui, buckets, output):
    ui.ui_enabled = False
    ui.render(AppState(), buckets)
    ui.print_warning("hidden")
    assert output.getvalue() == ""
