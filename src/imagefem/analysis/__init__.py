"""Mesh data: nodes, elements, element-type prototypes and the FEMObject container."""
