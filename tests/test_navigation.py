import random
from unittest.mock import MagicMock

import pytest

import local_database as local_db
from comfort import ComfortPhraseScheduler
from location import DEFAULT_COORDINATE, ClientPositionSource, LocationErrorKind, LocationProvider
from models import Coordinate, Place
from navigation import (
    GREETING_RATE,
    NavigationRefused,
    NavigationViewController,
    NavState,
    haversine_km,
    route_summary,
)
from places import SOS_QUERY
from speech import SpeechAnnouncer

HOME = Coordinate(-23.5600, -46.6500)


def _place(place_id="h1", coordinate=Coordinate(-23.5700, -46.6400)):
    return Place(id=place_id, name="Maternidade Central", address="Av. Paulista, 100",
                 rating=4.7, is_open=True, distance_label="1.4 km",
                 category="hospital", coordinate=coordinate)


@pytest.fixture
def source(clock):
    return ClientPositionSource(max_age_s=10, clock=clock)


@pytest.fixture
def search_client():
    client = MagicMock()
    client.search.return_value = [_place("h1"), _place("h2")]
    return client


@pytest.fixture
def controller(source, search_client, speech_engine, manual_scheduler):
    announcer = SpeechAnnouncer(speech_engine)
    comfort = ComfortPhraseScheduler(announcer, manual_scheduler, rng=random.Random(1))
    return NavigationViewController(
        provider=LocationProvider(source),
        search_client=search_client,
        announcer=announcer,
        comfort=comfort,
        scheduler=manual_scheduler,
    )


def _greeting_delay():
    return SpeechAnnouncer.estimate_duration(local_db.NAVIGATION_GREETING, GREETING_RATE)


def _start_guided(controller, source, manual_scheduler):
    source.push_fix(HOME)
    controller.search("maternidade")
    controller.select_place(controller.places[0])
    manual_scheduler.advance(_greeting_delay())


def test_search_lists_results(controller, source, search_client):
    source.push_fix(HOME)
    places = controller.search("maternidade")

    assert controller.state == NavState.LIST
    assert [p.id for p in places] == ["h1", "h2"]
    search_client.search.assert_called_once_with("maternidade", HOME)
    assert controller.snapshot()["view"]["query"] == "maternidade"


def test_blank_search_changes_nothing(controller, search_client):
    assert controller.search("  ") == []
    assert controller.state == NavState.LIST
    search_client.search.assert_not_called()


def test_last_search_to_resolve_wins(controller):
    controller.begin_search("farmácia")
    controller.begin_search("parque")

    controller.complete_search("parque", [_place("park")])
    assert controller.state == NavState.SEARCHING

    controller.complete_search("farmácia", [_place("pharm")])
    assert controller.state == NavState.LIST
    assert [p.id for p in controller.places] == ["pharm"]


def test_sos_searches_from_current_coordinate(controller, search_client):
    controller.sos()
    search_client.search.assert_called_once_with(SOS_QUERY, DEFAULT_COORDINATE)
    assert controller.state == NavState.LIST


def test_select_refused_when_permission_denied(controller, source, speech_engine, manual_scheduler):
    controller.search("hospital")
    source.push_error(LocationErrorKind.PERMISSION_DENIED)

    with pytest.raises(NavigationRefused):
        controller.select_place(controller.places[0])

    assert controller.state == NavState.LIST
    assert controller.session is None
    assert speech_engine.spoken == []
    assert manual_scheduler.pending == []
    assert controller.snapshot()["notice"]["kind"] == "permission_denied"
    assert controller.snapshot()["notice"]["dismissible"] is False


def test_select_greets_then_enters_guided(controller, source, speech_engine, manual_scheduler):
    source.push_fix(HOME)
    controller.search("maternidade")
    session = controller.select_place(controller.places[0])

    assert controller.state == NavState.STARTING_NAVIGATION
    assert session.origin_coordinate == HOME
    assert len(speech_engine.spoken) == 1
    assert speech_engine.spoken[0].text == local_db.NAVIGATION_GREETING
    assert speech_engine.spoken[0].rate == GREETING_RATE
    assert not controller.provider.watching

    manual_scheduler.advance(_greeting_delay())
    assert controller.state == NavState.GUIDED
    assert controller.provider.watching
    assert controller.comfort.active


def test_select_refused_outside_list(controller, source, manual_scheduler):
    _start_guided(controller, source, manual_scheduler)
    with pytest.raises(NavigationRefused):
        controller.select_place(_place("other"))
    with pytest.raises(NavigationRefused):
        controller.begin_search("farmácia")


def test_guided_view_shows_comfort_phrase(controller, source, manual_scheduler):
    _start_guided(controller, source, manual_scheduler)
    manual_scheduler.advance(30)

    view = controller.snapshot()["view"]
    assert view["support_message"] in local_db.COMFORT_PHRASES
    assert view["route"]["destination"] == "Maternidade Central"
    assert "saddr=-23.56,-46.65" in view["route"]["map_url"]


def test_exit_stops_everything_and_keeps_results(controller, source, speech_engine, manual_scheduler):
    _start_guided(controller, source, manual_scheduler)
    manual_scheduler.advance(31)

    controller.exit_navigation()

    assert controller.state == NavState.LIST
    assert controller.session is None
    assert not controller.comfort.active
    assert not controller.provider.watching
    assert speech_engine.events[-1][0] == "cancel"
    assert [p.id for p in controller.places] == ["h1", "h2"]

    spoken = len(speech_engine.spoken)
    manual_scheduler.advance(120)
    assert len(speech_engine.spoken) == spoken


def test_exit_during_greeting_cancels_guided_entry(controller, source, manual_scheduler):
    source.push_fix(HOME)
    controller.search("maternidade")
    controller.select_place(controller.places[0])
    controller.exit_navigation()

    manual_scheduler.advance(60)
    assert controller.state == NavState.LIST
    assert not controller.comfort.active


def test_exit_is_safe_from_list(controller):
    controller.exit_navigation()
    controller.exit_navigation()
    assert controller.state == NavState.LIST


def test_signal_loss_during_guidance_keeps_last_position(controller, source, manual_scheduler):
    _start_guided(controller, source, manual_scheduler)
    moved = Coordinate(-23.5650, -46.6450)
    source.push_fix(moved)
    source.push_error(LocationErrorKind.SIGNAL_LOST)

    snapshot = controller.snapshot()
    assert snapshot["state"] == "guided"
    assert snapshot["notice"]["dismissible"] is True
    assert snapshot["location"]["coordinate"] == moved.to_dict()
    assert snapshot["view"]["coordinate"] == moved.to_dict()
    assert controller.provider.watching

    controller.dismiss_notice()
    assert controller.snapshot()["notice"] is None


def test_denied_during_guidance_stops_tracking(controller, source, manual_scheduler):
    _start_guided(controller, source, manual_scheduler)
    source.push_error(LocationErrorKind.PERMISSION_DENIED)

    assert not controller.provider.watching
    notice = controller.snapshot()["notice"]
    assert notice["kind"] == "permission_denied"
    controller.dismiss_notice()
    assert controller.snapshot()["notice"] is not None

    controller.permission_granted()
    assert controller.provider.watching
    assert controller.snapshot()["notice"] is None


def test_route_summary_estimates_distance():
    origin = Coordinate(-23.5505, -46.6333)
    place = _place(coordinate=Coordinate(-23.5505, -46.5333))
    summary = route_summary(origin, place)

    assert summary["distance_km"] == pytest.approx(haversine_km(origin, place.coordinate), abs=0.1)
    assert 9 < summary["distance_km"] < 11
    assert summary["eta_minutes"] >= 18


def test_teardown_from_guided(controller, source, speech_engine, manual_scheduler):
    _start_guided(controller, source, manual_scheduler)
    controller.teardown()

    assert controller.state == NavState.LIST
    assert not controller.provider.watching
    assert speech_engine.current is None
    assert [h for h in manual_scheduler.pending] == []


def test_route_without_place_coordinates_uses_city_default():
    summary = route_summary(HOME, _place(coordinate=None))

    assert summary["distance_km"] == pytest.approx(haversine_km(HOME, DEFAULT_COORDINATE), abs=0.1)
    assert summary["distance_km"] > 0
    assert f"daddr={DEFAULT_COORDINATE.latitude},{DEFAULT_COORDINATE.longitude}" in summary["map_url"]


def test_session_start_is_timezone_aware(controller, source, manual_scheduler):
    _start_guided(controller, source, manual_scheduler)
    assert controller.session.started_at.tzinfo is not None
