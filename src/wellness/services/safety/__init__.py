"""
Safety services: crisis detection and emergency resources.
"""

from wellness.services.safety.crisis_detector import CrisisDetector
from wellness.services.safety.emergency_resources import (
    DEFAULT_RESOURCES,
    EmergencyResource,
    get_emergency_resources,
)

__all__ = [
    "CrisisDetector",
    "DEFAULT_RESOURCES",
    "EmergencyResource",
    "get_emergency_resources",
]
