#!/usr/bin/env python3
import os
import shutil
from pathlib import Path

def clean():
    """Remove logs, caches and coverage output left behind by runs and tests."""
    directories = [
        "logs",
        ".pytest_cache",
        "htmlcov",
        "build",
    ]
    
    files = [
        ".coverage",
        "coverage.xml",
    ]
    
    for directory in directories:
        if os.path.exists(directory):
            print(f"Removing directory: {directory}")
            shutil.rmtree(directory)
    
    for pattern in files:
        for file in Path(".").glob(pattern):
            print(f"Removing file: {file}")
            file.unlink()
    
    # Bytecode caches live next to every module
    for cache in Path(".").rglob("__pycache__"):
        print(f"Removing directory: {cache}")
        shutil.rmtree(cache)
    
    for egg_info in Path(".").glob("*.egg-info"):
        print(f"Removing directory: {egg_info}")
        shutil.rmtree(egg_info)
    
    print("Cleanup completed")

if __name__ == "__main__":
    clean()
