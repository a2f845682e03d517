"""
Bouncing engine core

- geometry: line rasterization and transform descriptors
- timeline: memoized step/delay sequences
- motion_compiler: per-marker visual states
"""
