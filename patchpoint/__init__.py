"""PatchPoint API: pothole reports from citizens and road sensors."""

__version__ = "0.3.0"
