"""CLI `dpd-pl` (Typer + Rich)."""
