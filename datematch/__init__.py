"""
Date plan recommendation service.

Matches a static catalog of activity templates against a pool of nearby
venues and a couple's preferences, and returns a short, diverse list of
concrete plans.
"""
