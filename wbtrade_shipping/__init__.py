"""
WB Trade Shipping

Tag-driven shipping package and cost computation for the WB Trade storefront.
"""
__version__ = "1.4.0"
