"""Main module for crypto_news MCP server.

This module allows the server to be run as a Python module using:
python -m crypto_news

It delegates to the server application's main function.
"""

from crypto_news.server.app import main

if __name__ == "__main__":
    main()
