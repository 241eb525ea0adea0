"""
Rentalist API Package
"""
from .client import RentalistClient, RentalistAPIError, MissingDataError
from .config import Config, configure_logging

__all__ = ['RentalistClient', 'RentalistAPIError', 'MissingDataError', 'Config', 'configure_logging']
