"""Timesheet System package.

This package is organized by feature modules (projects, time_entries,
timesheet, ...) with a thin Flask controller layer and service/repository
layers underneath.
"""
