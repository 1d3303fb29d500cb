"""Package marker for the Weak Ties API service.

Serves profile lookups, contact CSV uploads and the AI networking endpoints.
"""

from version import __version__  # noqa: F401
