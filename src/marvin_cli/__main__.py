"""Allow ``python -m marvin_cli``."""

from marvin_cli.app import main

if __name__ == "__main__":
    main()
