"""
Test package for the Rectangle Pack project.

This directory collects unit and integration tests for the core modules:

- Geometry toolkit (`test_geometry.py`)
- Adaptive grid-scan packer (`test_packing.py`)
- Major-direction finder (`test_direction.py`)
- Overlap / containment / coverage checks (`test_evaluation.py`)
- Batch orchestration and I/O (`test_batch.py`, `test_io.py`)

You can run tests with:

    pytest
    # or
    python -m pytest

from the project root.
"""

__all__ = []
