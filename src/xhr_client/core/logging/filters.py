"""
Log filters.
"""

import logging
from typing import Any, Dict


class ExtraFieldsFilter(logging.Filter):
    """
    Filter that adds static fields to all log records.

    Fields already present on the record are left untouched.

    Example:
        >>> handler.addFilter(ExtraFieldsFilter({"service": "billing"}))
    """

    def __init__(self, extra_fields: Dict[str, Any]):
        super().__init__()
        self.extra_fields = extra_fields

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.extra_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
