from azurecraft.tiers import (
    CATEGORIES,
    DEFAULT_TIER,
    SERVICE_CATEGORIES,
    category_for_service,
    tier_for_category,
    tier_label,
)


def test_security_left_of_networking_left_of_compute():
    assert tier_for_category("security") < tier_for_category("networking") < tier_for_category("compute")


def test_tier_table():
    assert tier_for_category("identity") == 0
    assert tier_for_category("networking") == 1
    assert tier_for_category("integration") == 2
    assert tier_for_category("storage") == 3
    assert tier_for_category("ai-ml") == 4
    assert tier_for_category("management") == 5


def test_unknown_category_mid_tier():
    assert tier_for_category("teleportation") == DEFAULT_TIER
    assert tier_for_category(None) == DEFAULT_TIER


def test_every_category_has_a_tier():
    for category in CATEGORIES:
        assert 0 <= tier_for_category(category) <= 5


def test_every_service_type_has_a_known_category():
    assert len(SERVICE_CATEGORIES) == 26
    for category in SERVICE_CATEGORIES.values():
        assert category in CATEGORIES


def test_category_for_service():
    assert category_for_service("aks") == "containers"
    assert category_for_service("mystery") == "compute"


def test_tier_label():
    assert tier_label(1) == "Networking"
    assert tier_label(42) == "Other"
