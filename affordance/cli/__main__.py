"""Allow running as: python -m affordance.cli"""
from affordance.cli.main import main

if __name__ == "__main__":
    main()
