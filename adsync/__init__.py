"""Avito advertising metrics to Google Sheets."""
