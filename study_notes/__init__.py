"""AI Study Notes: turn uploaded course documents into study notes and chat over them."""

__version__ = "1.0.0"
