"""Administrative back office for the PDF document repository."""

__version__ = "0.1.0"
