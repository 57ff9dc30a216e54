"""Bearer token verification and permission maps."""
