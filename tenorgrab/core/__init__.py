from .engine import render, run
from .environment import Environment
from .resolver import link_for, resolve

__all__ = ["Environment", "link_for", "render", "resolve", "run"]
