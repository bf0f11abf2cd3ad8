"""DataBridge alert engine - email alerts for failed and stale module syncs."""

__version__ = "1.0.0"
