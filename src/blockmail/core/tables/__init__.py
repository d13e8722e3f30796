"""Table column and width arithmetic."""
