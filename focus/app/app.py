"""Main Dash application setup."""
from dash import Dash

from focus.app import callbacks, layout
from focus.config import DASH_DEBUG, DASH_PORT
from focus.constants import APP_TITLE
from focus.data_manager import DataManager
from focus.utils import setup_logger

logger = setup_logger(__name__)


def create_app(data_manager: DataManager) -> Dash:
    """
    Create and configure the Dash application.

    Args:
        data_manager: DataManager wrapping the API client and market cap cache

    Returns:
        Configured Dash application
    """
    # Pages are built by the router, so most component ids are absent at startup
    app = Dash(__name__, title=APP_TITLE, suppress_callback_exceptions=True)

    app.layout = layout.create_layout()
    callbacks.register_callbacks(app, data_manager)

    return app


def run_app(app: Dash) -> None:
    """Run the Dash application."""
    logger.info(f"Starting Dash… open http://127.0.0.1:{DASH_PORT}/")
    app.run(debug=DASH_DEBUG, port=DASH_PORT)
