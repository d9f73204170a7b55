"""
ecoestate_api — HTTP API over the EcoEstate data services.

Start with:
    uvicorn ecoestate_api.app:app --port 3001
    ecoestate serve
"""

__version__ = "0.1.0"
