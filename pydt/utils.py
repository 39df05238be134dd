from typing import TypeAlias
from numpy.typing import NDArray
import numpy as np

# Upper bound on super-triangle growth. 2**128 covers the float32 range.
MAX_DOUBLINGS = 128
# Extra doublings once every point is enclosed
SUPER_TRIANGLE_MARGIN = 10

Vec2d: TypeAlias = tuple[float, float] | NDArray[np.floating]
