"""NextBoard core: cache-backed data access, authentication sessions and admin menu state."""
