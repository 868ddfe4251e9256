"""Back-office operator accounts and JWT authentication."""
