"""Command-line interface for iDempiere CLI."""
