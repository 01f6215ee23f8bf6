"""Collector process wiring: settings, services, routes and HTTP runtime."""
