"""Application entry point for the OCR Form Reader API server."""

import uvicorn

from form_reader.api.app import app
from form_reader.utils.config import load_config
from form_reader.utils.logger import setup_logging


def main() -> None:
    """Start the FastAPI application server."""
    config = load_config()
    setup_logging(config.log_level)
    uvicorn.run(app, host=config.api.host, port=config.api.port)


if __name__ == "__main__":
    main()
