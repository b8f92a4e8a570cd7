"""Entity Hub compliance engine: recurring filings, follow-up tasks and reminder digests."""

__version__ = "1.0.0"
