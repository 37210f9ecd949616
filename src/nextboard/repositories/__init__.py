"""Read-only entity lookups over the table cache."""
