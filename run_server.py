"""
Barbershop API Runner
Run this as a standalone process: python run_server.py
"""

import logging
import sys

import uvicorn

from barbershop.config import PORT

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logger.info(f"🚀 Starting Barbershop API on port {PORT}...")
    try:
        uvicorn.run("barbershop.main:app", host="0.0.0.0", port=PORT)
    except KeyboardInterrupt:
        logger.info("👋 Server stopped by user")
    except Exception as e:
        logger.error(f"❌ Server crashed: {e}")
        sys.exit(1)
