"""Command line interface for pyMGSem."""
