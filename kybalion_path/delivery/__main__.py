"""
Entry point for running Kybalion Path as a module.

Usage:
    python -m kybalion_path.delivery practice
    python -m kybalion_path.delivery status
    python -m kybalion_path.delivery --help
"""
from .path_cli import main

if __name__ == "__main__":
    main()
