import sys

from scripts.fitness_cli import main


if __name__ == "__main__":
    sys.exit(main())
