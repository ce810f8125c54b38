"""Import all detector modules to trigger @register decorators.

Import order is the deterministic merge order of candidates within a tick.
"""

from pulse_core.detection.detectors import volatility  # noqa: F401
from pulse_core.detection.detectors import skew  # noqa: F401
from pulse_core.detection.detectors import premium  # noqa: F401
from pulse_core.detection.detectors import hedge  # noqa: F401
from pulse_core.detection.detectors import momentum  # noqa: F401
