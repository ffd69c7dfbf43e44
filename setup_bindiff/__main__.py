"""
Entry point for running setup-bindiff as a module.

Usage: python -m setup_bindiff [options]
"""

from setup_bindiff.cli.parser import main

if __name__ == "__main__":
    main()
