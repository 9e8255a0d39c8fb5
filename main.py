#!/usr/bin/env python3
"""
Run Keystone Login from a checkout without installing it.

Host, port and the Keystone endpoint come from the environment or a
``.env`` file, exactly as for the installed ``keystone-login`` command.
"""

import sys
from pathlib import Path

# Add the src directory to Python path
src_dir = Path(__file__).parent / "src"
sys.path.insert(0, str(src_dir))


if __name__ == "__main__":
    from keystone_login.main import main

    main()
