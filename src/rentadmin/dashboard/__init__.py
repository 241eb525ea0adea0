"""
Rentalist admin dashboard: Flask views plus the table, form and loader state they drive
"""
from .tables import RecordTable, ListingsTable, LeadsTable, PartnersTable, TableResult, TABLES
from .forms import RecordForm, ListingForm, LeadForm, PartnerForm, FormResult, FORMS
from .loaders import PageData, DashboardData, load_dashboard, COLLECTION_LOADERS, RECORD_LOADERS

__all__ = [
    # Tables
    'RecordTable',
    'ListingsTable',
    'LeadsTable',
    'PartnersTable',
    'TableResult',
    'TABLES',
    # Forms
    'RecordForm',
    'ListingForm',
    'LeadForm',
    'PartnerForm',
    'FormResult',
    'FORMS',
    # Loaders
    'PageData',
    'DashboardData',
    'load_dashboard',
    'COLLECTION_LOADERS',
    'RECORD_LOADERS',
]
