# =============================================================================
# racf_core/server/__main__.py
# python -m racf_core.server
# =============================================================================

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from racf_core.logging import setup_logging, get_logger
from racf_core.server.app import create_app


def main() -> None:
    load_dotenv()
    setup_logging(log_filename="racf_server.log")

    port = int(os.getenv("PORT", "4000"))
    data_dir = Path(os.getenv("RACF_SERVER_DATA_DIR", "server_data"))

    get_logger(__name__).info(f"User management API ready on http://localhost:{port}/api")
    uvicorn.run(create_app(data_dir=data_dir), host=os.getenv("HOST", "0.0.0.0"), port=port)


if __name__ == "__main__":
    main()
