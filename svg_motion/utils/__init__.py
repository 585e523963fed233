"""Cross-cutting utilities (lowest dependency layer).

    - Atomic I/O and YAML helpers (fs)
    - Logging setup for embedding applications (logging_config)

No module in utils/ may import from other svg_motion subpackages.

Convenience imports:
    from svg_motion.utils import fs
    from svg_motion.utils.logging_config import setup_logging, logging_context
"""

from . import fs
from . import logging_config

__all__ = ["fs", "logging_config"]
