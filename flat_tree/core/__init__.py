"""Core engine, models and services. No I/O beyond logging."""
