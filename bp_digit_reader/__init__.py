"""
Blood-Pressure Monitor Digit Reader

Reads systolic, diastolic and pulse values from a photo of a
seven-segment blood-pressure monitor display.
Pipeline: DECODE → SUPPRESSION → GROUPING → ASSEMBLY → ROUTING
"""

__version__ = "1.0.0"
__author__ = "BP Digit Reader Team"
