"""thin proxies between the portfolio site and third-party apis"""

__version__ = "0.1.0"
