"""
Entry point for running rtldoc as a module.

Usage:
    python -m rtldoc types
    python -m rtldoc generate "طلب خطي" --field fullName=Amina --field idNumber=77
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
