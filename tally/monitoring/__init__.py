# tally/monitoring - Exposition and periodic ticking

from .exposition import Renderable, render_structure
from .ticker import Ticker

__all__ = ["Renderable", "render_structure", "Ticker"]
