"""
Rentalist Admin - listings, leads and partners management for the Rentalist marketplace
"""
from .api import RentalistClient, RentalistAPIError, Config
from .models import (
    Listing, ListingStatus, RoomType, Locale, Lead, LeadStatus, ListingRef,
    Partner, PartnerStatus, ApiResponse, slugify
)

__version__ = '1.0.0'
__all__ = [
    # API
    'RentalistClient',
    'RentalistAPIError',
    'Config',
    # Models
    'Listing',
    'ListingStatus',
    'RoomType',
    'Locale',
    'Lead',
    'LeadStatus',
    'ListingRef',
    'Partner',
    'PartnerStatus',
    'ApiResponse',
    'slugify',
]
