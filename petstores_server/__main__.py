"""Allow running as ``python -m petstores_server``."""

from .cli import main

main()
