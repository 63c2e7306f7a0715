import logging
import os
import socket
from typing import Optional

from table_browser.ui.dash_app import create_dash_app
from table_browser.logging_config import configure_logging

configure_logging()
logger = logging.getLogger("table_browser.app")

app = create_dash_app()
server = app.server


def find_free_port(host: str, preferred: int, attempts: int = 100) -> Optional[int]:
    """First port in [preferred, preferred + attempts) that can be bound on host, or None."""
    for port in range(preferred, preferred + attempts):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            try:
                s.bind((host, port))
            except OSError:
                continue
            return port
    return None


if __name__ == "__main__":
    host = os.getenv("HOST", "0.0.0.0")
    preferred_port = int(os.getenv("PORT", "8051"))
    debug = os.getenv("DEBUG", "0") == "1"

    port = find_free_port(host, preferred_port)
    if port is None:
        raise SystemExit(f"No free port in {preferred_port}-{preferred_port + 99} on {host}")
    if port != preferred_port:
        logger.warning(
            "Preferred port taken; using next free port",
            extra={"preferred_port": preferred_port, "port": port},
        )

    app.run(host=host, port=port, debug=debug)
