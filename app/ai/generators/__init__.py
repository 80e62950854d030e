"""Subject content generators."""

from app.ai.generators.base import MAX_ATTEMPTS, BaseGenerator
from app.ai.generators.general import GeneralGenerator
from app.ai.generators.math import MathGenerator
from app.ai.generators.reading import ReadingGenerator
from app.ai.generators.science import ScienceGenerator

__all__ = ["MAX_ATTEMPTS", "BaseGenerator", "GeneralGenerator", "MathGenerator", "ReadingGenerator", "ScienceGenerator"]
