"""``python -m storecast`` runs the administration CLI."""

from storecast.cli import main

if __name__ == "__main__":
    main()
