"""
SmartHire - hiring pipeline workflow and skill-based job matching.
"""

__app_name__ = "SmartHire"
__version__ = "0.1.0"
