"""
CLAUDY — Entry Point
Run: python -m claudy  OR  claudy
"""

from .cli import main


if __name__ == "__main__":
    main()
