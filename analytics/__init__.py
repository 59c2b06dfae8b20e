"""
Analysis helpers for the listing insights backend.

This package centralizes reusable helpers for loading the listings dataset,
filtering pandas DataFrames, aggregating groups, computing amenity premiums,
producing chart-ready JSON, and generating lightweight summaries.
"""
