import os
from dotenv import load_dotenv
from utils.constants import TIMING

# Render Configuration
IS_RENDER = os.environ.get("RENDER", "") == "true"

# Only load the .env file if we're not on Render (i.e., we are in a local environment)
if not IS_RENDER:
    load_dotenv()

# Flask Configuration
SECRET_KEY = os.getenv('SECRET_KEY', 'a_very_secret_key_that_should_be_changed')
CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

# Socket.IO Configuration
ASYNC_MODE = os.getenv('ASYNC_MODE', 'eventlet')
PING_TIMEOUT = int(os.getenv('PING_TIMEOUT', 60))
PING_INTERVAL = int(os.getenv('PING_INTERVAL', 25))

# Lobby Configuration
START_DELAY_SEC = float(os.getenv('START_DELAY_SEC', TIMING['START_DELAY_SEC']))

# Static client
STATIC_DIR = os.getenv('STATIC_DIR', os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'static'))
INDEX_DOCUMENT = os.getenv('INDEX_DOCUMENT', 'ww1game.html')

# Server Configuration
PORT = int(os.getenv('PORT', 3000))
DEBUG = not IS_RENDER
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


def as_flask_config() -> dict:
    """Settings in the shape expected by app.config."""
    return {
        'SECRET_KEY': SECRET_KEY,
        'CORS_ORIGINS': CORS_ORIGINS,
        'ASYNC_MODE': ASYNC_MODE,
        'PING_TIMEOUT': PING_TIMEOUT,
        'PING_INTERVAL': PING_INTERVAL,
        'START_DELAY_SEC': START_DELAY_SEC,
        'STATIC_DIR': STATIC_DIR,
        'INDEX_DOCUMENT': INDEX_DOCUMENT,
        'PORT': PORT,
        'DEBUG': DEBUG,
        'LOG_LEVEL': LOG_LEVEL,
    }
