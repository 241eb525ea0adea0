#!/usr/bin/env python3
"""
Rentalist Admin Dashboard - deployment entry point

    gunicorn app:app
    python app.py
"""
from rentadmin.api import Config, configure_logging
from rentadmin.dashboard.app import app, main

configure_logging()

print(f"[STARTUP] Backend API: {Config.API_BASE_URL}")
print(f"[STARTUP] Public site: {Config.PUBLIC_URL}")
print(f"[STARTUP] Debug mode: {Config.DEBUG}")


if __name__ == '__main__':
    main()

# This runs when gunicorn imports the module
print("[STARTUP] App module fully loaded and ready to serve requests")
