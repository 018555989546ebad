"""Notification targeting and delivery core for the campus platform."""
