"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Spyfall rules, point values and the location catalog
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    SPYFALL_LOCATIONS, MIN_PLAYERS, MAX_PLAYERS, SPY_WIN_POINTS, NON_SPY_WIN_POINTS,
    validate_location_catalog, get_catalog_statistics
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'SPYFALL_LOCATIONS', 'MIN_PLAYERS', 'MAX_PLAYERS', 'SPY_WIN_POINTS', 'NON_SPY_WIN_POINTS',
    'validate_location_catalog', 'get_catalog_statistics'
]
