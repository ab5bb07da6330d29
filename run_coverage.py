"""Helper script to run the unit tests with coverage programmatically."""

import sys
from pathlib import Path
import coverage
import pytest

# Add project root to Python path to ensure modules are found
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

# Library, step definitions and keyword libraries
cov = coverage.Coverage(
    source=["warehouse_bdd", "tests.step_defs", str(project_root / "robot" / "libraries")],
)
cov.start()

exit_code = pytest.main(["tests/unit/"])

cov.stop()
cov.save()

cov.report(show_missing=True)
sys.exit(exit_code)
