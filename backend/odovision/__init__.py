"""
OdoVision - odometer mileage recognition from photographs.
"""

__version__ = "1.0.0"
