"""
Vercel Serverless Function Entry Point

Vercel expects Python functions in the /api directory and picks up the
'app' variable as an ASGI application.
"""

import sys
from pathlib import Path

# Project root on the path so the opterra package imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from opterra.api.main import app

handler = app
