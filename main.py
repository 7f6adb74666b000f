"""Entry point for the bucket console web server."""

import logging
import os
import sys

from bucket_console.app import create_app
from bucket_console.config import Config


def main():
    config = Config(os.environ.get("CONFIG_PATH", "config.yaml"))

    logging.basicConfig(
        level=getattr(logging, str(config["logging"]["level"]).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)
    logger.info(
        "Starting bucket console (bucket=%s, queue=%s)",
        config["storage"]["bucket"] or "not set",
        "configured" if config["queue"]["url"] else "not configured",
    )

    app = create_app(config)
    server = config["server"]
    app.run(host=server["host"], port=server["port"], debug=server["debug"], use_reloader=False)


if __name__ == "__main__":
    main()
