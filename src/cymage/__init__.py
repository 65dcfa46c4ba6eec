"""cymage: turn numbered test plans into Cypress specs, one batch at a time."""

__version__ = "0.1.0"
