import logging
import os

from dotenv import load_dotenv
# Load environment variables first to ensure all configs are set
load_dotenv()

from ledger_admin import create_app

logging.basicConfig(
    level=os.getenv('LOG_LEVEL', 'INFO').upper(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

# Create the Flask application instance using the app factory pattern
app = create_app()

if __name__ == "__main__":
    # For development, app.run() is used.
    # For production, run under gunicorn with gunicorn_config.py.
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5001")), debug=os.getenv("APP_ENV") != "production")
