"""Contribution store package."""

from supertracker.store.contributions import ContributionStore, YearData

__all__ = ["ContributionStore", "YearData"]
