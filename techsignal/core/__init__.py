"""Core shared logic for indicators, signal composition, and models.

This package contains pure business logic with no I/O dependencies
(no network access). The clients and services packages feed it data.
"""
