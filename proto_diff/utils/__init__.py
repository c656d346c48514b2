"""
Utility functions and helpers.

Components:
    - logging: Logging configuration with a Rich handler on stderr

Example:
    ```python
    from proto_diff.utils import setup_logging

    setup_logging(level="DEBUG")
    ```
"""

from proto_diff.utils.logging import setup_logging

__all__ = ["setup_logging"]
