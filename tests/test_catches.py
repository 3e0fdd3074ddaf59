from datetime import datetime, timezone

import pytest

from features.catches.models.catch_types import CatchData
from features.catches.services.catch_analytics_service import EMPTY_HISTORY_TIP, CatchAnalyticsService
from features.catches.services.catch_log_service import CatchLogService
from features.common.exceptions.domain_exceptions import CatchConflictError, CatchNotFoundError
from features.equipment.models.equipment_types import FishSpecies
from repositories.catch_repo import CatchRepository

USER = "user-1"


def _at(month, day, hour):
    return datetime(2024, month, day, hour, tzinfo=timezone.utc).timestamp()


@pytest.fixture
def log_service(session_factory):
    return CatchLogService(CatchRepository(session_factory))


@pytest.fixture
def analytics(log_service):
    return CatchAnalyticsService(log_service)


@pytest.fixture
def history(log_service):
    catches = [
        CatchData(id="c1", timestamp=_at(6, 10, 15), location_id="A", species=FishSpecies.COHO,
                  size=24.0, weight=8.0, equipment_used=["lure-apex-uv-glow", "flasher-oki-titan"]),
        CatchData(id="c2", timestamp=_at(6, 10, 18), location_id="A", species=FishSpecies.COHO,
                  size=26.0, equipment_used=["lure-apex-uv-glow"]),
        CatchData(id="c3", timestamp=_at(7, 2, 14), location_id="B", species=FishSpecies.CHINOOK,
                  size=34.0, weight=20.0, equipment_used=["lure-coyote-herring-scale", "flasher-oki-titan"]),
        CatchData(id="c4", timestamp=_at(6, 12, 14), location_id="A", species=FishSpecies.COHO),
    ]
    for catch in catches:
        log_service.log_catch(USER, catch)
    return catches


def test_history_is_newest_first_and_per_user(log_service, history):
    assert [c.id for c in log_service.get_catch_history(USER)] == ["c3", "c4", "c2", "c1"]
    assert log_service.get_catch_history("someone-else") == []


def test_filters(log_service, history):
    assert {c.id for c in log_service.get_catches_by_location(USER, "B")} == {"c3"}
    assert {c.id for c in log_service.get_catches_by_species(USER, FishSpecies.COHO)} == {"c1", "c2", "c4"}


def test_update_and_delete(log_service, history):
    updated = log_service.update_catch(USER, history[0].model_copy(update={"notes": "Off the bar"}))
    assert log_service.get_catch(USER, "c1").notes == "Off the bar"
    assert updated.notes == "Off the bar"

    log_service.delete_catch(USER, "c1")
    with pytest.raises(CatchNotFoundError):
        log_service.get_catch(USER, "c1")
    with pytest.raises(CatchNotFoundError):
        log_service.delete_catch(USER, "c1")
    with pytest.raises(CatchNotFoundError):
        log_service.update_catch(USER, history[0])


def test_other_users_cannot_read_catch(log_service, history):
    with pytest.raises(CatchNotFoundError):
        log_service.get_catch("someone-else", "c1")


def test_catch_id_owned_by_another_user_is_rejected(log_service, history):
    with pytest.raises(CatchConflictError):
        log_service.log_catch("someone-else", history[0].model_copy(update={"notes": "mine now"}))

    assert log_service.get_catch(USER, "c1").notes is None
    assert log_service.get_catch_history("someone-else") == []


def test_logging_again_keeps_owner(log_service, history):
    log_service.log_catch(USER, history[0].model_copy(update={"notes": "Relogged"}))
    assert log_service.get_catch(USER, "c1").notes == "Relogged"


def test_photos(log_service, history):
    log_service.add_photo(USER, "c3", "https://img.example.com/1.jpg")
    log_service.add_photo(USER, "c3", "https://img.example.com/1.jpg")
    log_service.add_photo(USER, "c3", "https://img.example.com/2.jpg")
    assert log_service.get_catch(USER, "c3").photo_urls == [
        "https://img.example.com/1.jpg",
        "https://img.example.com/2.jpg",
    ]

    log_service.remove_photo(USER, "c3", "https://img.example.com/1.jpg")
    assert log_service.get_catch(USER, "c3").photo_urls == ["https://img.example.com/2.jpg"]


def test_counts(analytics, history):
    assert analytics.get_catch_count_by_species(USER) == {FishSpecies.COHO: 3, FishSpecies.CHINOOK: 1}
    assert analytics.get_catch_count_by_location(USER) == {"A": 3, "B": 1}
    assert analytics.get_catch_count_by_month(USER) == {6: 3, 7: 1}


def test_averages_ignore_missing(analytics, history):
    assert analytics.get_average_size_by_species(USER) == {
        FishSpecies.COHO: pytest.approx(25.0),
        FishSpecies.CHINOOK: pytest.approx(34.0),
    }
    assert analytics.get_average_weight_by_species(USER) == {
        FishSpecies.COHO: pytest.approx(8.0),
        FishSpecies.CHINOOK: pytest.approx(20.0),
    }


def test_rankings_and_trend(analytics, history):
    equipment = analytics.get_most_successful_equipment(USER)
    assert {r.key for r in equipment[:2]} == {"lure-apex-uv-glow", "flasher-oki-titan"}
    assert [r.count for r in equipment] == [2, 2, 1]

    locations = analytics.get_most_successful_locations(USER)
    assert [(r.key, r.count) for r in locations] == [("A", 3), ("B", 1)]

    trend = analytics.get_catch_trend(USER)
    assert [(d.date, d.count) for d in trend] == [("2024-06-10", 2), ("2024-06-12", 1), ("2024-07-02", 1)]


def test_personalized_tips(analytics, history):
    tips = analytics.get_personalized_recommendations(USER)

    assert tips[0] == "You've had the most success catching COHO."
    assert tips[1] == "Your most productive fishing spot is location A."
    assert tips[2].startswith("Your most effective equipment includes: ")
    assert "lure-coyote-herring-scale" in tips[2]
    assert tips[3] == "Your best fishing month appears to be June."


def test_statistics_for_empty_history(analytics):
    stats = analytics.get_statistics(USER)

    assert stats.total_catches == 0
    assert stats.by_species == {}
    assert stats.by_month == {}
    assert stats.average_size_by_species == {}
    assert stats.most_successful_equipment == []
    assert stats.catch_trend == []
    assert stats.tips == [EMPTY_HISTORY_TIP]


def test_statistics_total(analytics, history):
    assert analytics.get_statistics(USER).total_catches == 4
