"""Backend for the MongoDB Atlas Local Docker Desktop extension."""

__version__ = "0.1.0"
