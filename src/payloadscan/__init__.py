"""payloadscan - flattens the request and response payload fields of API interfaces."""

__version__ = "0.1.0"
