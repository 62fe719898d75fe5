"""Boarding-house notification delivery, rent reminders and payment approval.

The package is laid out in layers: ``domain`` holds plain entities and the
error taxonomy, ``infrastructure`` the database, realtime hub and external
services, ``application`` the use cases and ``interfaces`` the HTTP surface.
"""
