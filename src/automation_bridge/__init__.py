"""OAuth installation and automation webhook service for monday.com apps."""

__version__ = "0.1.0"
