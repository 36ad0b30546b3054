"""Building blocks for device and network tooling: status codes, addresses, ports, sockets, serial lines, dispensers, caches, timers and a token-routing net."""

__version__ = "1.0.3"