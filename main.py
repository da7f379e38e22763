"""Main entry point for the focus token dashboard."""
from focus.app.app import create_app, run_app
from focus.data import ApiClient, MarketCapCache
from focus.data_manager import DataManager
from focus.utils import setup_logger

logger = setup_logger(__name__)


def main():
    """Wire the API client and shared cache into the dashboard and start it."""
    client = ApiClient()
    logger.info(f"Using API at {client.base_url}")

    data_manager = DataManager(client, MarketCapCache(client))

    app = create_app(data_manager)
    run_app(app)


if __name__ == "__main__":
    main()
