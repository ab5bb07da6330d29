"""Helper script to run the warehouse BDD scenarios against a live browser.

Writes JUnit XML and Cucumber JSON next to the HTML/JSON run report in the
configured output directory. Extra arguments are passed on to pytest:

    python run_scenarios.py -m Inbound
    python run_scenarios.py -k "cycle count"
"""

import sys
from pathlib import Path
import pytest

# Add project root to Python path to ensure modules are found
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from warehouse_bdd.config import load_settings  # noqa: E402

settings = load_settings()
output_dir = Path(settings.output_dir)
output_dir.mkdir(parents=True, exist_ok=True)

args = [
    "tests/execution/test_warehouse_scenarios.py",
    "-m", "WarehouseManagement",
    f"--junitxml={output_dir / 'junit.xml'}",
    f"--cucumberjson={output_dir / 'cucumber.json'}",
    "-v",
]

sys.exit(pytest.main(args + sys.argv[1:]))
