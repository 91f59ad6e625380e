"""volley - declarative API test execution engine."""

__version__ = "0.1.0"
