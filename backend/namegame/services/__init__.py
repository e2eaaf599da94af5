"""Domain services: verification, scoring and session timers.

This package contains the game's core logic, imported by HTTP routes,
socket handlers and CLI commands, keeping transport concerns separated
from verification and scoring.
"""
