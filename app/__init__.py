"""Notification digest service for The Human Canvas."""
