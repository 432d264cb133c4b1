"""Allow running as: python -m state_mc"""

from .cli import main

if __name__ == '__main__':
    main()
