"""Build-time generators for the Net Thud static football site."""

from .config import AppConfig, ConfigurationError, load_config, load_settings
from .football_data import FootballDataApi, ProviderError
from .probability import HDA, NEUTRAL_HDA, compute_hda, ratings_from_standings, team_rating

__all__ = [
    "AppConfig",
    "ConfigurationError",
    "FootballDataApi",
    "HDA",
    "NEUTRAL_HDA",
    "ProviderError",
    "compute_hda",
    "load_config",
    "load_settings",
    "ratings_from_standings",
    "team_rating",
]
