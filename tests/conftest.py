"""
Test configuration and fixtures
"""
import sys
from pathlib import Path

# Add project root and src to Python path
project_root = Path(__file__).parent.parent
src_path = project_root / "src"

sys.path.insert(0, str(src_path))

# Shared helpers (constants, fake clock) live beside the vesting tests
sys.path.insert(0, str(Path(__file__).parent / "vestledger_tests"))
