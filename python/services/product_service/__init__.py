"""Product Service: in-memory product catalog over HTTP."""
