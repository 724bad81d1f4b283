"""
Entry point for running codebase_audit as a module.

Usage: python -m codebase_audit [args]
"""

from codebase_audit.cli import main

if __name__ == "__main__":
    main()
