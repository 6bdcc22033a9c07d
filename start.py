#!/usr/bin/env python
"""Start the Twin Reference Service.

Uses config.yaml next to this script when present. To run against the
bundled sample fixture:

    cp config.sample.yaml config.yaml
    python start.py
"""

import os
from pathlib import Path

# Change to script directory so relative paths in config work
script_dir = Path(__file__).parent.resolve()
os.chdir(script_dir)

if __name__ == "__main__":
    if (script_dir / "config.yaml").exists():
        os.environ.setdefault("TWINREF_CONFIG", str(script_dir / "config.yaml"))

    from twinref_svc.main import run
    run()
