"""CLI module for the scenario sensitivity risk model.

Provides command-line interfaces for:
- Summarising saved scenario sensitivity arrays
"""
