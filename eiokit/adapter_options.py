"""Settings for a Redis-backed broadcast adapter."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass
class RedisAdapterOptions:
    """Connection settings for the Redis adapter.

    ``host`` and ``port`` are kept for older configurations; ``addr`` is
    preferred.
    """

    host: str = ""
    port: str = ""
    addr: str = ""
    prefix: str = ""
    network: str = ""
    password: str = ""

    def get_addr(self) -> str:
        """Return the address, building it from host and port if unset."""
        if not self.addr:
            self.addr = f"{self.host}:{self.port}"
        return self.addr


def default_options() -> RedisAdapterOptions:
    """Return the default adapter options."""
    return RedisAdapterOptions(addr="127.0.0.1:6379", prefix="socket.io", network="tcp")


def get_options(opts: RedisAdapterOptions | None) -> RedisAdapterOptions:
    """Return the defaults overlaid with every non-empty field of ``opts``."""
    options = default_options()
    if opts is None:
        return options
    overrides = {
        name: value
        for name, value in vars(opts).items()
        if value
    }
    return replace(options, **overrides)