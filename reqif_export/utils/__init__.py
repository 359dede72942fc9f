from .logger import setup_logging
from .identifiers import new_identifier, utc_now

__all__ = ["setup_logging", "new_identifier", "utc_now"]
