import pytest

from features.common.exceptions.domain_exceptions import EquipmentNotFoundError
from features.equipment.models.equipment_types import EquipmentItem, EquipmentType, FishSpecies, UserEquipment
from features.equipment.services.equipment_service import EquipmentService
from features.equipment.services.recommendation_service import REASON_PREFIX, RecommendationService
from features.tides.models.tide_types import TideType
from repositories.equipment_repo import EquipmentRepository
from tests.conftest import make_tide, make_weather


@pytest.fixture
def service(session_factory):
    return RecommendationService(EquipmentService(EquipmentRepository(session_factory)))


def _by_type(recommendations):
    return {r.type: r for r in recommendations}


def test_catalog_is_seeded(service):
    catalog = service.get_equipment_catalog()
    assert len(catalog) == 16
    assert len(service.get_equipment_by_type(EquipmentType.FLASHER)) == 5
    assert len(service.get_equipment_by_type(EquipmentType.LURE)) == 6
    assert len(service.get_equipment_by_type(EquipmentType.LEADER)) == 5
    assert service.get_equipment_by_id("leader-wire-60").material == "Wire"
    assert service.get_equipment_by_id("missing") is None


def test_clear_bright_calm_rising(service):
    recommendations = service.get_recommendations(make_weather(), make_tide())

    assert [r.type for r in recommendations] == [EquipmentType.FLASHER, EquipmentType.LURE, EquipmentType.LEADER]
    by_type = _by_type(recommendations)

    flasher = by_type[EquipmentType.FLASHER]
    assert [i.id for i in flasher.items] == ["flasher-hot-spot-green", "flasher-gibbs-delta-chrome"]
    assert flasher.confidence_score == pytest.approx(0.8)
    assert flasher.reason_for_recommendation.startswith(REASON_PREFIX)
    assert "larger flashers" in flasher.reason_for_recommendation
    assert flasher.reason_for_recommendation.endswith(" Optimized for clear water clarity.")

    lure = by_type[EquipmentType.LURE]
    assert [i.id for i in lure.items] == [
        "lure-coho-killer-green",
        "lure-coho-killer-blue",
        "lure-apex-uv-glow",
        "lure-coyote-herring-scale",
    ]
    assert lure.confidence_score == pytest.approx(0.5 + (1 - 4 / 6) * 0.5)

    leader = by_type[EquipmentType.LEADER]
    assert [i.id for i in leader.items] == ["leader-fluorocarbon-30", "leader-short-fluorocarbon-25"]
    assert "heavier leaders" not in leader.reason_for_recommendation


def test_falls_back_to_whole_category(service):
    # Murky, bright and windy: no flasher matches every tag
    weather = make_weather(visibility=1.0, cloud_cover=10, wind_speed=20.0)
    recommendations = service.get_recommendations(weather, make_tide(type=TideType.LOW))

    flasher = _by_type(recommendations)[EquipmentType.FLASHER]
    # Clarity filter then narrows the fallback to murky-tagged items
    assert {i.id for i in flasher.items} == {
        "flasher-hot-spot-red",
        "flasher-oki-titan",
        "flasher-kingfisher-lite",
    }
    # 0.5 for the fallback, raised for dropping two of five
    assert flasher.confidence_score == pytest.approx(0.58)
    leader = _by_type(recommendations)[EquipmentType.LEADER]
    assert "heavier leaders" in leader.reason_for_recommendation
    assert "shorter leaders" in leader.reason_for_recommendation


def test_species_filter_narrows_and_raises_confidence(service):
    recommendations = service.get_recommendations(make_weather(), make_tide(), species=FishSpecies.SOCKEYE)

    flasher = _by_type(recommendations)[EquipmentType.FLASHER]
    assert [i.id for i in flasher.items] == ["flasher-gibbs-delta-chrome"]
    assert flasher.confidence_score == pytest.approx(0.9)
    assert " Filtered for SOCKEYE salmon." in flasher.reason_for_recommendation


def test_always_three_recommendations(service):
    weather = make_weather(visibility=3.0, cloud_cover=90, precipitation=4.0)
    for tide_type in TideType:
        recommendations = service.get_recommendations(weather, make_tide(type=tide_type), species=FishSpecies.PINK)
        assert len(recommendations) == 3
        assert all(r.items for r in recommendations)
        assert all(0.3 <= r.confidence_score <= 0.95 for r in recommendations)


def test_user_equipment_moves_to_front(service):
    owned = [
        UserEquipment(equipment_id="lure-coyote-herring-scale", equipment_type=EquipmentType.LURE),
        UserEquipment(equipment_id="lure-apex-uv-glow", equipment_type=EquipmentType.LURE, is_favorite=True),
    ]
    recommendations = service.get_recommendations(make_weather(), make_tide(), user_equipment=owned)

    lure = _by_type(recommendations)[EquipmentType.LURE]
    assert [i.id for i in lure.items][:2] == ["lure-apex-uv-glow", "lure-coyote-herring-scale"]
    assert lure.reason_for_recommendation.endswith(" Prioritized based on your equipment preferences.")
    assert lure.confidence_score == pytest.approx(0.5 + (1 - 4 / 6) * 0.5 + 0.1)

    flasher = _by_type(recommendations)[EquipmentType.FLASHER]
    assert "Prioritized" not in flasher.reason_for_recommendation


@pytest.mark.parametrize("filtered,total,expected", [
    (0, 5, 0.5),
    (3, 0, 0.5),
    (5, 5, 0.5),
    (1, 5, 0.9),
    (1, 100, 0.95),
])
def test_confidence_score(filtered, total, expected):
    assert RecommendationService.calculate_confidence_score(filtered, total) == pytest.approx(expected)


def test_catalog_edits_are_picked_up(session_factory):
    equipment_service = EquipmentService(EquipmentRepository(session_factory))
    assert len(equipment_service.get_catalog()) == 16

    custom = EquipmentItem(
        id="flasher-custom",
        name="Custom Flasher",
        description="Home-made",
        type=EquipmentType.FLASHER,
        tide_conditions=[TideType.LOW]
    )
    equipment_service.save(custom)
    flashers = equipment_service.get_by_type(EquipmentType.FLASHER)
    assert flashers[-1] == custom
    assert equipment_service.require("flasher-custom").tide_conditions == [TideType.LOW]

    equipment_service.delete("flasher-custom")
    assert equipment_service.get_by_id("flasher-custom") is None
    with pytest.raises(EquipmentNotFoundError):
        equipment_service.require("flasher-custom")
    with pytest.raises(EquipmentNotFoundError):
        equipment_service.delete("flasher-custom")
