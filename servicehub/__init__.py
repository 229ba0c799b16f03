"""ServiceHub - service-center work-item engine (appointments and projects)"""

__version__ = "1.0.0"
