#!/usr/bin/env python3
"""
Start the rundown back-office.

Configuration comes from the environment (or a .env file):
PORT, RUNDOWN_USER, RUNDOWN_PASS, RUNDOWN_FILENAME and optionally RUNDOWN_SEED.
"""

import sys
from pathlib import Path

# Load environment variables from .env file first
import dotenv
dotenv.load_dotenv()

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn

from rundown.api.main import create_app
from rundown.core import config
from rundown.core.placement import LockedRandom
from rundown.core.store import FileRepo, PersistenceError
from util.logging import logger


def main():
    issues = config.validate_config()
    if issues:
        for issue in issues:
            logger.error(f"Configuration error: {issue}")
        return 2

    filename = config.get_data_filename()
    try:
        repo = FileRepo.open(filename, rng=LockedRandom(config.get_seed()))
    except PersistenceError as e:
        logger.error(f"Error when opening data file: {e}")
        print("   Create one with: python scripts/init_dataset.py " + filename)
        return 1

    username, password = config.get_credentials()
    app = create_app(repo, username, password)

    port = config.get_port()
    logger.info(f"Running on port {port}")
    uvicorn.run(app, host="0.0.0.0", port=port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
