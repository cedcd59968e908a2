"""
catsa-janga: save and restore progress for long-running processes.

A checkpoint store persists a caller-supplied snapshot to a single file,
and a shutdown coordinator saves it one last time when the process is
interrupted, terminated or crashes.
"""

__version__ = "1.1.0"
