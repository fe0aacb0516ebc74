import logging

import uvicorn

from jobboard.config import settings

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("jobboard.main:app", host=settings.host, port=settings.port)
