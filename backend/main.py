"""
CivicWatch Backend: FastAPI OSINT aggregation server
Modular entry point. All logic is split across:
  config.py, models.py, data_fetchers.py, sentiment.py, scoring.py,
  hotspots.py, aggregator.py, routes.py
"""

import logging

from config import LOG_LEVEL, PORT

logging.basicConfig(level=LOG_LEVEL)

from routes import app  # noqa: F401,E402

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
