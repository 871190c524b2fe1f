"""Utility functions for time operations."""

from datetime import datetime
from typing import Optional

BACKUP_STAMP_FORMAT = "%Y%m%d-%H%M%S"


def generate_backup_stamp(moment: Optional[datetime] = None) -> str:
    """Generate the timestamp suffix used in backup directory names."""
    if moment is None:
        moment = datetime.now()
    return moment.strftime(BACKUP_STAMP_FORMAT)


def format_duration(seconds: float) -> str:
    """Format duration in human readable format."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        minutes = seconds / 60
        return f"{minutes:.1f}m"
    else:
        hours = seconds / 3600
        return f"{hours:.1f}h"
