"""authgate: signup, login, token validation and Google sign-in backed by MongoDB or a JSON file."""

__version__ = "0.1.0"
