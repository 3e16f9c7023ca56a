"""
Box Rental Service Toolkit

Domain logic shared by the admin, driver and customer dashboards:
- Chilean RUT formatting and módulo 11 validation
- Rental pricing and guarantee calculation
- Inventory availability checks against the backend API
- Tracking codes, status vocabularies and route guarding
"""

__version__ = "0.1.0"
