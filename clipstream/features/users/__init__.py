"""User accounts: registration, login, profiles."""
