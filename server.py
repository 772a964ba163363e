#!/usr/bin/env python3
"""Top Web Directories — agency backend.

Launch: python3 server.py
Serves at http://0.0.0.0:5000 (or PORT env var)
"""

import logging
import os

import uvicorn

from agency_hub.config import HOST, PORT


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger("agency_hub")

    missing = [k for k in ("SUPABASE_URL", "SUPABASE_SERVICE_KEY") if not os.environ.get(k)]
    if missing:
        logger.warning("%s not set — database calls will fail. Continuing for local development...",
                       ", ".join(missing))
    if not os.environ.get("OPENAI_API_KEY"):
        logger.warning("OPENAI_API_KEY not set — chatbot will use fallback replies")
    if not os.environ.get("RESEND_API_KEY"):
        logger.warning("RESEND_API_KEY not set — report emails cannot be sent")

    from agency_hub.app import create_app
    app = create_app()

    logger.info("Starting server on http://%s:%s", HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT, log_level="info")


if __name__ == "__main__":
    main()
