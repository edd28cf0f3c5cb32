"""
fsclookup - Ration Card Household Lookup

An HTTP service that looks up a Food Security Card (FSC) reference number on
the Telangana ePDS portal and returns the household record as JSON.
"""

__version__ = "0.1.0"
__author__ = "fsclookup Contributors"
