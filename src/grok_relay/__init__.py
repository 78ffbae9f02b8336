"""An OpenAI-compatible relay in front of the xAI Grok chat completions API."""

__version__ = "0.1.0"

from .config import load_config
from .api import app

from .upstream import fetch_json, open_stream, relay_stream
from .utils import build_upstream_body, split_reasoning_effort
