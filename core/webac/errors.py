"""
Exceptions raised across the WebAC store boundary.
"""

from typing import Optional


class StoreAccessError(Exception):
    """
    The backing store could not answer a read.

    Raised by store implementations and propagated unchanged out of role
    resolution, so an outage is never mistaken for "no grants".
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
