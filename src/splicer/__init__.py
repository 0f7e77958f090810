"""Splicer group-buying API.

Administrators publish products, users open group deals on them and join or
leave those deals; the participation lifecycle keeps deal counters and status
consistent with the participant rows.
"""

__version__ = "0.1.0"
