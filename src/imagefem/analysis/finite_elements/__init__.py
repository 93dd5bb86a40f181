from imagefem.analysis.finite_elements.finite_element import ElementType
from imagefem.analysis.finite_elements.quad4 import Quad4Membrane
from imagefem.analysis.finite_elements.hex8 import Hex8Membrane

__all__ = ["ElementType", "Quad4Membrane", "Hex8Membrane"]
