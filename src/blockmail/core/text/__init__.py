"""Run algebra over formatted text."""
