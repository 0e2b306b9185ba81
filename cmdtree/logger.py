# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global logger instance for the cmdtree framework."""
import logging

logger: logging.Logger = logging.getLogger("cmdtree")
