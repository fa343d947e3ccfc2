"""Unit test configuration - environment for the HTTP app"""

import os

# CRITICAL: Set env vars BEFORE importing search_server.main
# main.py reads configuration and sets up logging at module level
os.environ.setdefault("LOG_FILE", "")  # console only, no log files from tests
os.environ.setdefault("SEARCH_STOP_WORDS", "and in on")
os.environ.setdefault("QUERY_WORKERS", "4")
