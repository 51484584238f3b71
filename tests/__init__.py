"""
Test suite for the rtldoc project.

This module contains all unit tests for the rtldoc package.
"""

import sys
from pathlib import Path

# Add the package source directory to the Python path
package_root = Path(__file__).parent.parent / "packages" / "rtldoc_core"
sys.path.insert(0, str(package_root))
