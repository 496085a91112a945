#!/usr/bin/env python3
"""Default configuration values for iosync.

These constants are the defaults the CLI falls back to when an option is
not given on the command line or in the environment.
"""

# Well-known filesystem path of the local request/response endpoint.
DEFAULT_SOCKET_PATH: str = "/tmp/iosync_socket"

# Environment variable overriding DEFAULT_SOCKET_PATH.
SOCKET_PATH_ENVVAR: str = "IOSYNC_SOCKET"

# Clipboard poll interval in seconds. Bounds local-to-remote latency.
POLL_INTERVAL: float = 0.2

# Deadline in seconds for reading one request from a socket connection.
REQUEST_TIMEOUT: float = 5.0

# Deadline in seconds for the client to receive the full reply.
REPLY_TIMEOUT: float = 5.0

# Client connect retry parameters (exponential backoff, bounded attempts).
# Delay before retry n is WAIT_MULTIPLIER * 2**(n-1), clamped to
# [INITIAL_WAIT, MAX_WAIT].
CONNECT_ATTEMPTS: int = 3
INITIAL_WAIT: float = 0.1
MAX_WAIT: float = 1.0
WAIT_MULTIPLIER: float = 0.1
