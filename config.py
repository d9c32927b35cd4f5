import os
from dotenv import load_dotenv

load_dotenv()


def _default_api_url() -> str:
    # Reads and writes share one origin; override per deployment
    url = os.environ.get('SCHOOLS_API_URL', 'https://schoolmanagement-server.onrender.com')
    return url.rstrip('/')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'your-secret-key'

    SCHOOLS_API_URL = _default_api_url()
    SCHOOLS_ASSET_URL = (os.environ.get('SCHOOLS_ASSET_URL') or SCHOOLS_API_URL).rstrip('/')
    SCHOOLS_API_TIMEOUT = float(os.environ.get('SCHOOLS_API_TIMEOUT', 10))

    # Seconds before the add form hands control back to the list page
    SUCCESS_REDIRECT_DELAY = float(os.environ.get('SUCCESS_REDIRECT_DELAY', 2))

    # Upload ceiling for the whole request; the 5MB image rule is enforced by the validator
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 16 * 1024 * 1024))

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    # Developer server started by `python wsgi.py`; falls back to a free port when taken
    DEV_SERVER_PORT = int(os.environ.get('PORT', 8000))
    OPEN_BROWSER = os.environ.get('OPEN_BROWSER', '1') not in ('0', 'false', 'no')
