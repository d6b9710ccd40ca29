from unittest.mock import MagicMock, patch

import local_database as local_db
from gemini_service import GeminiService
from models import Coordinate, Outcome, Place
from places import SOS_QUERY, PlaceSearchClient

ORIGIN = Coordinate(-23.5505, -46.6333)
FALLBACK_IDS = [p["id"] for p in local_db.PLACES]


def _place(i):
    return Place(id=f"p{i}", name=f"Lugar {i}", address="Rua A", rating=4.0,
                 is_open=True, distance_label="1 km", category="hospital")


def test_blank_query_does_not_call_service():
    service = MagicMock()
    client = PlaceSearchClient(service)
    assert client.search("   ", ORIGIN) == []
    service.find_nearby_places.assert_not_called()


def test_service_crash_returns_offline_list():
    service = MagicMock()
    service.find_nearby_places.side_effect = RuntimeError("network down")
    places = PlaceSearchClient(service).search("farmácia", ORIGIN)
    assert [p.id for p in places] == FALLBACK_IDS


def test_empty_result_returns_offline_list():
    service = MagicMock()
    service.find_nearby_places.return_value = Outcome(value=[])
    places = PlaceSearchClient(service).search("parque", ORIGIN)
    assert [p.id for p in places] == FALLBACK_IDS


def test_results_are_bounded():
    service = MagicMock()
    service.find_nearby_places.return_value = Outcome(value=[_place(i) for i in range(8)])
    places = PlaceSearchClient(service, max_results=5).search("hospital", ORIGIN)
    assert len(places) == 5
    assert places[0].id == "p0"


def test_identical_queries_are_not_cached():
    service = MagicMock()
    service.find_nearby_places.return_value = Outcome(value=[_place(1)])
    client = PlaceSearchClient(service)
    client.search("pediatra", ORIGIN)
    client.search("pediatra", ORIGIN)
    assert service.find_nearby_places.call_count == 2


def test_sos_uses_emergency_query():
    service = MagicMock()
    service.find_nearby_places.return_value = Outcome(value=[_place(1)])
    PlaceSearchClient(service).sos(ORIGIN)
    args, kwargs = service.find_nearby_places.call_args
    assert args[0] == SOS_QUERY
    assert args[1] == ORIGIN


@patch("gemini_service.genai.GenerativeModel")
def test_sos_unreachable_service_still_lists_places(mock_model):
    mock_model.return_value.generate_content.side_effect = ConnectionError("offline")
    client = PlaceSearchClient(GeminiService(api_key="test-key"))
    places = client.sos(ORIGIN)
    assert [p.id for p in places] == FALLBACK_IDS


@patch("gemini_service.genai.GenerativeModel")
def test_parses_fenced_json_array(mock_model):
    mock_model.return_value.generate_content.return_value = MagicMock(text=(
        "```json\n"
        '[{"id": "h1", "name": "Hospital Sírio", "address": "Rua X", "rating": 4.8,'
        ' "isOpen": true, "distance": "1.2 km", "lat": -23.55, "lng": -46.65, "type": "hospital"},'
        ' {"name": "sem id"}]\n'
        "```"
    ))
    places = PlaceSearchClient(GeminiService(api_key="test-key")).search("hospital", ORIGIN)

    assert len(places) == 1
    assert places[0].name == "Hospital Sírio"
    assert places[0].is_open is True
    assert places[0].coordinate == Coordinate(-23.55, -46.65)
