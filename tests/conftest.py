"""Root pytest configuration for all tests."""

import logging

# atlassian-python-api logs expected lookup misses at ERROR level
logging.getLogger("atlassian").setLevel(logging.WARNING)
