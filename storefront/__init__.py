"""Motorcycle parts storefront catalog core.

Category hierarchy, multi-entity search and navigation state
synchronization for the brand -> motorcycle model browser.
"""

__version__ = "0.1.0"
