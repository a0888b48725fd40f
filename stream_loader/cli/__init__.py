from .__main__ import EXIT_FATAL, EXIT_SUCCESS, EXIT_UNCONFIRMED, main

__all__ = ["main", "EXIT_SUCCESS", "EXIT_FATAL", "EXIT_UNCONFIRMED"]
