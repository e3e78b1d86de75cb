"""
Game Configuration Constants Module

This module defines the Spyfall rules constants and the location catalog.
All game parameters are centralized here so the session engine and the
offline round functions agree on them.
"""

from typing import Dict, Final, Tuple

from ..models.game import Location

# Roster bounds shared by both game modes
MIN_PLAYERS: Final[int] = 3
MAX_PLAYERS: Final[int] = 16

# Points credited on a terminal win condition (session mode only)
SPY_WIN_POINTS: Final[int] = 3
NON_SPY_WIN_POINTS: Final[int] = 2

# Curated location catalog. Every location carries at least one role.
SPYFALL_LOCATIONS: Final[Tuple[Location, ...]] = (
    Location("Airplane", ("First Class Passenger", "Air Marshal", "Mechanic",
                          "Economy Class Passenger", "Flight Attendant", "Co-Pilot", "Captain")),
    Location("Bank", ("Armored Car Driver", "Manager", "Consultant", "Customer",
                      "Robber", "Security Guard", "Teller")),
    Location("Beach", ("Beach Waitress", "Kite Surfer", "Lifeguard", "Thief",
                       "Beach Goer", "Beach Photographer", "Ice Cream Truck Driver")),
    Location("Casino", ("Bartender", "Head Security Guard", "Bouncer", "Manager",
                        "Hustler", "Dealer", "Gambler")),
    Location("Cathedral", ("Priest", "Beggar", "Sinner", "Parishioner",
                           "Tourist", "Sponsor", "Choir Singer")),
    Location("Circus Tent", ("Acrobat", "Animal Trainer", "Magician", "Visitor",
                             "Fire Eater", "Clown", "Juggler")),
    Location("Corporate Party", ("Entertainer", "Manager", "Unwanted Guest", "Owner",
                                 "Secretary", "Accountant", "Delivery Boy")),
    Location("Crusader Army", ("Monk", "Imprisoned Arab", "Servant", "Bishop",
                               "Squire", "Archer", "Knight")),
    Location("Day Spa", ("Customer", "Stylist", "Masseuse", "Manicurist",
                         "Makeup Artist", "Dermatologist", "Beautician")),
    Location("Embassy", ("Security Guard", "Secretary", "Ambassador", "Government Official",
                         "Tourist", "Refugee", "Diplomat")),
    Location("Hospital", ("Nurse", "Doctor", "Anesthesiologist", "Intern",
                          "Patient", "Therapist", "Surgeon")),
    Location("Hotel", ("Doorman", "Security Guard", "Manager", "Housekeeper",
                       "Customer", "Bartender", "Bellman")),
    Location("Military Base", ("Deserter", "Colonel", "Medic", "Soldier",
                               "Sniper", "Officer", "Tank Engineer")),
    Location("Movie Studio", ("Stunt Man", "Sound Engineer", "Camera Man", "Director",
                              "Costume Artist", "Actor", "Producer")),
    Location("Ocean Liner", ("Rich Passenger", "Cook", "Captain", "Bartender",
                             "Musician", "Waiter", "Mechanic")),
    Location("Passenger Train", ("Mechanic", "Border Patrol", "Train Attendant", "Passenger",
                                 "Restaurant Chef", "Engineer", "Stoker")),
    Location("Pirate Ship", ("Cook", "Sailor", "Slave", "Cannoneer",
                             "Bound Prisoner", "Cabin Boy", "Brave Captain")),
    Location("Polar Station", ("Medic", "Geologist", "Expedition Leader", "Biologist",
                               "Radioman", "Hydrologist", "Meteorologist")),
    Location("Police Station", ("Detective", "Lawyer", "Journalist", "Criminalist",
                                "Archivist", "Patrol Officer", "Criminal")),
    Location("Restaurant", ("Musician", "Customer", "Bouncer", "Hostess",
                            "Head Chef", "Food Critic", "Waiter")),
    Location("School", ("Gym Teacher", "Student", "Principal", "Security Guard",
                        "Janitor", "Lunch Lady", "Maintenance Man")),
    Location("Service Station", ("Manager", "Tire Specialist", "Biker", "Car Owner",
                                 "Car Wash Operator", "Electrician", "Auto Mechanic")),
    Location("Space Station", ("Engineer", "Alien", "Space Tourist", "Pilot",
                               "Commander", "Scientist", "Doctor")),
    Location("Submarine", ("Cook", "Commander", "Sonar Technician", "Electronics Technician",
                           "Sailor", "Radioman", "Navigator")),
    Location("Supermarket", ("Customer", "Cashier", "Butcher", "Janitor",
                             "Security Guard", "Food Sample Demonstrator", "Shelf Stocker")),
    Location("Theater", ("Coat Check Lady", "Prompter", "Cashier", "Visitor",
                         "Director", "Actor", "Crew Man")),
    Location("University", ("Graduate Student", "Professor", "Dean", "Psychologist",
                            "Maintenance Man", "Student", "Janitor")),
)


def validate_location_catalog() -> bool:
    """
    Validates the integrity of the location catalog.

    Checks that every location has a non-blank name, at least one non-blank
    role, and that location names are unique ignoring case.

    Returns:
        bool: True if the catalog passes all validation checks

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    if not SPYFALL_LOCATIONS:
        raise ValueError("Location catalog cannot be empty")

    seen = set()
    for index, location in enumerate(SPYFALL_LOCATIONS):
        if not location.name.strip():
            raise ValueError(f"Location at index {index} has an empty name")

        if not location.roles:
            raise ValueError(f"Location '{location.name}' has no roles")

        if any(not role.strip() for role in location.roles):
            raise ValueError(f"Location '{location.name}' has an empty role")

        key = location.name.strip().lower()
        if key in seen:
            raise ValueError(f"Duplicate location found in catalog: {location.name}")
        seen.add(key)

    return True


def get_catalog_statistics() -> Dict:
    """Summarize the catalog for balancing and monitoring."""
    if not SPYFALL_LOCATIONS:
        return {"error": "Location catalog is empty"}

    role_counts = {location.name: len(location.roles) for location in SPYFALL_LOCATIONS}
    total_roles = sum(role_counts.values())

    return {
        "total_locations": len(SPYFALL_LOCATIONS),
        "total_roles": total_roles,
        "avg_roles_per_location": round(total_roles / len(SPYFALL_LOCATIONS), 2),
        "min_roles": min(role_counts.values()),
        "max_roles": max(role_counts.values()),
    }


if __name__ == "__main__":

    try:
        validate_location_catalog()
        print(" Location catalog validation passed")

        stats = get_catalog_statistics()
        print(f" Catalog statistics: {stats}")
    except ValueError as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)
