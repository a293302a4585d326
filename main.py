import logging
import sys
from pathlib import Path

import config
import server

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def run(config_path: str = "config.yaml") -> None:
    cfg = config.load(Path(config_path))
    level = str(cfg.get("log_level", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)

    local_tz = config.local_timezone(cfg)
    app = server.create_app(cfg, local_tz)

    host = cfg["server"].get("host", "0.0.0.0")
    port = cfg["server"].get("port", 8080)
    logger.info("Server is listening on port %s (timezone %s)", port, local_tz)
    app.run(host=host, port=port, threaded=True)


if __name__ == "__main__":
    config_path = sys.argv[1] if len(sys.argv) > 1 else "config.yaml"
    run(config_path)
