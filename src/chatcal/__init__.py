"""ChatCal - Chat Message to Calendar Event

Finds the date/time in a short chat message and renders it as an iCalendar
document and a Google Calendar link.
"""

__version__ = "0.1.0"
__author__ = "ChatCal Team"
__description__ = "Chat Message to Calendar Event"

from .core.application import ChatCalApp, ExportBundle

__all__ = ["ChatCalApp", "ExportBundle", "__version__"]
