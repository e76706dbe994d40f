import logging

import uvicorn

from rag_workshop.config import get_config


def main():
    config = get_config()
    logging.basicConfig(level=config.logging.level)
    uvicorn.run("rag_workshop.api:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
