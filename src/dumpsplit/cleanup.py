"""Signal handling so an interrupted run still releases its output files."""

from __future__ import annotations

import logging
import signal


def register_signal_handlers() -> None:
    """
    Turn SIGTERM into SystemExit.

    The scanner closes its outputs in ``finally`` blocks; SIGINT already raises
    KeyboardInterrupt, SIGTERM would otherwise kill the process without
    unwinding.
    """
    def signal_handler(signum: int, frame) -> None:
        logging.warning(f"Received signal {signum}, closing outputs...")
        raise SystemExit(1)

    signal.signal(signal.SIGTERM, signal_handler)
