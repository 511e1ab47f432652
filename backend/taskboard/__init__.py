"""
Taskboard: role-based tasks, announcements and calendar API.
"""
__version__ = "0.1.0"
