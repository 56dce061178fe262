"""Clock Terminal package.

Offline-capable attendance kiosk for shop staff, organized by feature modules
(geofence, staff, attendance, sync, presence, terminal) with a thin Flask
controller layer over service/repository layers.
"""
from .main import create_app

__all__ = ["create_app"]
