"""Infrastructure - configuration, logging and the remote catalog client."""
