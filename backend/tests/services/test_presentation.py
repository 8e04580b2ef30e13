# backend/tests/services/test_presentation.py
import pytest

from backend.app.schemas.site import SiteRead
from backend.app.schemas.weather import WeatherRecord
from backend.app.services import presentation


def _site(site_id, name, state):
    return SiteRead(id=site_id, name=name, state=state, latitude=45.0, longitude=-95.0)


@pytest.fixture
def sites():
    return [
        _site("1", "wahpeton", "ND"),
        _site("2", "Brookings", "SD"),
        _site("3", "Fargo West", "ND"),
        _site("4", "Austin", "MN"),
    ]


@pytest.fixture
def cache():
    # "4" failed, "2" was never fetched
    return {
        "1": WeatherRecord(precip_24hr_in=0.3),
        "3": WeatherRecord(precip_24hr_in=0.0),
        "4": None,
    }


@pytest.mark.parametrize("precip, expected", [
    (None, ""),
    (0.0, ""),
    (0.01, "has-rain"),
    (0.25, "moderate"),
    (0.49, "moderate"),
    (0.5, "heavy"),
    (2.0, "heavy"),
])
def test_precip_class(precip, expected):
    assert presentation.precip_class(precip) == expected


@pytest.mark.parametrize("degrees, label", [
    (None, "---"),
    (0, "N"),
    (23, "NNE"),
    (90, "E"),
    (191.25, "SSW"),
    (350, "N"),
    (360, "N"),
])
def test_wind_dir_label(degrees, label):
    assert presentation.wind_dir_label(degrees) == label


def test_precip_bar_percent_caps_at_full_scale():
    assert presentation.precip_bar_percent(None) == 0
    assert presentation.precip_bar_percent(0.25) == pytest.approx(25.0)
    assert presentation.precip_bar_percent(3.0) == 100.0


def test_weather_status_distinguishes_absent_failed_and_zero(cache):
    assert presentation.weather_status("2", cache) == "pending"
    assert presentation.weather_status("4", cache) == "unavailable"
    assert presentation.weather_status("3", cache) == "ok"


def test_sort_by_name_ignores_case(sites, cache):
    ordered = presentation.sort_sites(sites, cache, "name")
    assert [s.name for s in ordered] == ["Austin", "Brookings", "Fargo West", "wahpeton"]


def test_sort_by_state_then_name(sites, cache):
    ordered = presentation.sort_sites(sites, cache, "state")
    assert [s.id for s in ordered] == ["4", "3", "1", "2"]


def test_sort_by_precip_puts_missing_readings_last(sites, cache):
    ordered = presentation.sort_sites(sites, cache, "precip")
    assert [s.id for s in ordered[:2]] == ["1", "3"]
    assert {s.id for s in ordered[2:]} == {"2", "4"}


def test_sort_is_recomputed_from_cache_snapshot(sites, cache):
    wetter = dict(cache, **{"2": WeatherRecord(precip_24hr_in=1.2)})
    assert presentation.sort_sites(sites, wetter, "precip")[0].id == "2"
    assert presentation.sort_sites(sites, cache, "precip")[0].id == "1"


def test_sort_unknown_key(sites, cache):
    with pytest.raises(ValueError):
        presentation.sort_sites(sites, cache, "elevation")


def test_state_filters_and_filtering(sites):
    assert presentation.state_filters(sites) == ["all", "MN", "ND", "SD"]
    assert [s.id for s in presentation.filter_sites(sites, "nd")] == ["1", "3"]
    assert len(presentation.filter_sites(sites, "all")) == 4
    assert len(presentation.filter_sites(sites, None)) == 4


def test_summary(sites, cache):
    assert presentation.summary(sites, cache) == "4 sites · 1 reporting precipitation"
    assert presentation.summary(sites[:1], {}) == "1 site · No precipitation detected"
    assert presentation.summary([], {}) == "0 sites"


def test_site_detail_view(sample_record):
    site = SiteRead(id="a", name="Fargo West", state="ND", latitude=46.87654, longitude=-96.78912)

    view = presentation.site_detail(site, {"a": sample_record})

    assert view["weather_status"] == "ok"
    assert view["precip_24hr_in"] == 0.06
    assert view["precip_class"] == "has-rain"
    assert view["coordinates"] == "46.877, -96.789"
    assert view["humidity"] == 81
    assert view["wind_dir_label"] == "NNE (23°)"
    assert view["temp_f"] == 68.0


def test_site_detail_view_without_weather():
    site = SiteRead(id="a", name="Fargo West", state="ND", latitude=46.877, longitude=-96.789)

    view = presentation.site_detail(site, {"a": None})

    assert view["weather_status"] == "unavailable"
    assert view["precip_24hr_in"] is None
    assert view["temp_f"] is None
    assert view["wind_dir_label"] == "---"


def test_list_view(sites, cache):
    view = presentation.list_view(sites, cache, state="ND", sort="precip")

    assert view["summary"] == "4 sites · 1 reporting precipitation"
    assert view["filters"] == ["all", "MN", "ND", "SD"]
    assert [row["id"] for row in view["rows"]] == ["1", "3"]
    assert view["rows"][0]["precip_class"] == "moderate"


def test_summary_while_loading(sites, cache):
    assert presentation.summary(sites, cache, loading=True) == "Loading sites..."
    assert presentation.list_view(sites, cache, loading=True)["summary"] == "Loading sites..."


@pytest.mark.parametrize("state, selected", [("mn", "MN"), ("ND", "ND"), ("all", "all"), ("ALL", "all"), (None, "all")])
def test_list_view_reports_applied_filter(sites, cache, state, selected):
    view = presentation.list_view(sites, cache, state=state)
    assert view["selected_filter"] == selected
    if selected != "all":
        assert all(row["state"] == selected for row in view["rows"])
    else:
        assert len(view["rows"]) == 4
