"""ipol-factory - polynomial surrogates of simulation observables.

Scans a directory of simulation runs, reads the requested histogram bins of
every run and fits, per bin, a polynomial in the run parameters whose order
is chosen on held-out runs. The result is written as a text ipol file.
"""

from .config import IpolConfig, make_config
from .factory import IpolFactory
from .models.ipol import Ipol

__version__ = "0.1.0"
__all__ = ["Ipol", "IpolConfig", "IpolFactory", "make_config"]
