"""
Utility helpers for the Rectangle Pack project.

Small, reusable helpers that don't naturally belong in `geometry`,
`packers`, `direction` or `batch`:

- Reading boundaries / writing result tables (`io.py`)
- Plotting packings and major directions (`plotting.py`)
- Logging setup for scripts (`log.py`)
"""

__all__ = []
