"""Food production traceability records: lots, cold chain, cleaning, expiry alerts."""

__version__ = "1.0.0"
