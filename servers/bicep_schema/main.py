"""Entry point for BicepMCP Schema Server."""

import sys
from pathlib import Path

# Add the project src directory to the Python path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

from bicepmcp.schema_server.server import main

if __name__ == "__main__":
    main()
