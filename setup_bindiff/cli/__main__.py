"""
Entry point for running the setup-bindiff CLI as a module.

Usage: python -m setup_bindiff.cli [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
