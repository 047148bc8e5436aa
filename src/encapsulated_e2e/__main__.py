"""Allow running as ``python -m encapsulated_e2e``."""

from .main import main

main()
