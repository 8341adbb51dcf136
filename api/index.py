# Vercel entry point: the Python runtime serves the ASGI `app` exported here
from portfolio_proxy.main import app

__all__ = ["app"]
