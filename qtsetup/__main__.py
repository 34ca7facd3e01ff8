"""
Entry point for running qtsetup as a module.

Usage: python -m qtsetup [command] [options]
"""

from qtsetup.cli.parser import main

if __name__ == "__main__":
    main()
