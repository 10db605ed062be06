"""
Allow running the package directly: python -m julia_renderer
"""
from .app import run

run()
