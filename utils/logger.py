import logging
import logging.config
from pathlib import Path
from typing import Any, Dict

def setup_logger(logging_config: Dict[str, Any]) -> logging.Logger:
    """Apply a dictConfig mapping once at process start"""
    for handler in logging_config.get("handlers", {}).values():
        filename = handler.get("filename")
        if filename:
            Path(filename).parent.mkdir(exist_ok=True, parents=True)
    logging.config.dictConfig(logging_config)
    return logging.getLogger()
