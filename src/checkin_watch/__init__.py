"""Missed check-in detection engine.

Feature modules (organization, schedules, holidays, checkins, missed_checkins,
notifications, events) each expose a domain model, a repository Protocol with a MySQL
implementation, and services. ``container.build_container`` wires them together and
``main.create_app`` puts a thin Flask review API and CLI on top.
"""
