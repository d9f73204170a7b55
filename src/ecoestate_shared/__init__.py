"""
ecoestate_shared — settings, constants, and data models for the EcoEstate backend.

Usage:
    from ecoestate_shared.config import settings
    from ecoestate_shared.models import PostalCodeData, PriceTrend, FeatureCollection
    from ecoestate_shared.constants import BUILDING_TYPES, WALKING_ZONE_LAYERS
"""

__version__ = "0.1.0"
