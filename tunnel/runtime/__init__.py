"""Runtime package.

Keep this module dependency-light: importing `tunnel.runtime.*` must not open
sockets or start tasks; that happens when a process calls the builders.
"""

__all__: list[str] = []
