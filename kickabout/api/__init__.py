"""HTTP API for the kickabout attendance service."""
