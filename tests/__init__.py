"""
Test cases of the layer-diff package.
"""
