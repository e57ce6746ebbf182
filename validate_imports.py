#!/usr/bin/env python3
"""Import validation script for Python backend
This script validates that the application and all controllers can be imported without errors.
Run during build phase to catch import-time errors before deployment.
"""
import importlib
import sys
import os
import traceback

# Add current directory to path for imports
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.insert(0, current_dir)

MODULES = [
    "Repositories.TestProjectsRepository",
    "Controllers.TestController",
    "main",
]

def validate(modules=MODULES):
    """Import each module, return the names that failed"""
    failed = []
    for name in modules:
        try:
            importlib.import_module(name)
            print(f"✓ Successfully imported {name}")
        except Exception as e:
            print(f"✗ Failed to import {name}: {e}")
            traceback.print_exc()
            failed.append(name)
    return failed

if __name__ == "__main__":
    if validate():
        sys.exit(1)
    print("✓ All imports validated successfully")
    sys.exit(0)
