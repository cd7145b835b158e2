"""TalentBridge - job and education marketplace backend."""

__version__ = "1.0.0"
