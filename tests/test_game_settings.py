from spyfall_server.config.game_settings import (
    MAX_PLAYERS, MIN_PLAYERS, SPYFALL_LOCATIONS, get_catalog_statistics, validate_location_catalog
)


def test_catalog_is_valid():
    assert validate_location_catalog() is True


def test_every_location_has_roles():
    assert SPYFALL_LOCATIONS
    for location in SPYFALL_LOCATIONS:
        assert location.name.strip()
        assert location.roles


def test_roster_bounds():
    assert (MIN_PLAYERS, MAX_PLAYERS) == (3, 16)


def test_catalog_statistics():
    stats = get_catalog_statistics()
    assert stats['total_locations'] == len(SPYFALL_LOCATIONS)
    assert stats['total_roles'] == sum(len(loc.roles) for loc in SPYFALL_LOCATIONS)
    assert stats['min_roles'] <= stats['avg_roles_per_location'] <= stats['max_roles']
