"""Pre-processing: image descriptors, materials and the rectilinear mesh generator."""
