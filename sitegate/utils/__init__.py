from sitegate.utils.timeutils import isoformat, utc_now

__all__ = ["isoformat", "utc_now"]
