"""Command line interface for release-ledger."""
