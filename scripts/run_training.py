"""
Synthetic-data training demo.

Usage:
  pip install -e .
  python scripts/run_training.py kmeans --iterations 50
"""

from iterative_ml.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
