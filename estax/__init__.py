"""estax: Form 1040-ES estimated tax worksheets."""

__version__ = "0.1.0"
