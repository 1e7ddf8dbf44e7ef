"""Text reports for worksheet results."""

from estax.reports.worksheet_summary import WorksheetSummaryGenerator

__all__ = ["WorksheetSummaryGenerator"]
