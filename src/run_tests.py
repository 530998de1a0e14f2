#!/usr/bin/env python3
"""
Run All Tests
=============

Portable test runner for mathkit. Works from any location:
    python3 src/run_tests.py

Extra arguments are forwarded to pytest:
    python3 src/run_tests.py -k polyhedrons
"""

import os
import subprocess
import sys
from pathlib import Path


def main(argv=None):
    """Run the test suite, forwarding extra arguments to pytest."""
    src_root = Path(__file__).parent.resolve()

    env = os.environ.copy()
    pythonpath = env.get('PYTHONPATH', '')
    if pythonpath:
        env['PYTHONPATH'] = f"{src_root}{os.pathsep}{pythonpath}"
    else:
        env['PYTHONPATH'] = str(src_root)

    extra = list(sys.argv[1:] if argv is None else argv)
    result = subprocess.run(
        [sys.executable, '-m', 'pytest', 'tests/', '-v', '--tb=short', *extra],
        cwd=src_root,
        env=env,
    )

    return result.returncode


if __name__ == '__main__':
    sys.exit(main())
