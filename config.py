# config.py

import os
import yaml
import logging

logger = logging.getLogger(__name__)


def load_config():
    """
    Load configuration from the YAML file specified by CONFIG_PATH environment variable or the default path.

    Returns:
        dict: Parsed configuration dictionary.
    """
    CONFIG_PATH = os.getenv("CONFIG_PATH", "config.yaml")

    if not os.path.exists(CONFIG_PATH):
        logger.error(f"Configuration file '{CONFIG_PATH}' not found.")
        raise FileNotFoundError(f"Configuration file '{CONFIG_PATH}' not found.")

    try:
        with open(CONFIG_PATH, 'r') as f:
            config = yaml.safe_load(f) or {}
            logger.info(f"Configuration loaded successfully from '{CONFIG_PATH}'.")
            return config
    except yaml.YAMLError as e:
        logger.error(f"Error parsing YAML file '{CONFIG_PATH}': {e}")
        raise


# Load the configuration file
config = load_config()

DEBUG_MODE = bool(config.get("debug_mode", False))
WEBHOOK_SECRET = os.getenv("GITHUB_WEBHOOK_SECRET", config.get("github_webhook_secret") or "")
MANAGEMENT_API_KEY = config.get("management_api_key") or ""
MAPPINGS_PATH = os.getenv("MAPPINGS_PATH", config.get("mappings_path", "mappings.yaml"))
REQUEST_TIMEOUT = float(config.get("request_timeout", 10))
CORS_ORIGINS = config.get("cors_origins", ["*"])

# Confluence settings
CONFLUENCE_SETTINGS = config.get("confluence") or {}
CONFLUENCE_SETTINGS['base_url'] = os.getenv("CONFLUENCE_BASE_URL", CONFLUENCE_SETTINGS.get('base_url') or "")
CONFLUENCE_SETTINGS['email'] = os.getenv("CONFLUENCE_EMAIL", CONFLUENCE_SETTINGS.get('email') or "")
CONFLUENCE_SETTINGS['api_token'] = os.getenv("CONFLUENCE_API_TOKEN", CONFLUENCE_SETTINGS.get('api_token') or "")

# GitHub settings
GITHUB_SETTINGS = config.get("github") or {}
GITHUB_SETTINGS['token'] = os.getenv("GITHUB_TOKEN", GITHUB_SETTINGS.get('token') or "")
GITHUB_SETTINGS['webhook_url'] = os.getenv("PUBLIC_WEBHOOK_URL", GITHUB_SETTINGS.get('webhook_url') or "")
GITHUB_SETTINGS['api_url'] = GITHUB_SETTINGS.get('api_url') or "https://api.github.com"

# Validate configuration
if not WEBHOOK_SECRET:
    logger.warning("GitHub webhook secret is not set. Webhook signatures will not be verified.")
if not all([CONFLUENCE_SETTINGS['base_url'], CONFLUENCE_SETTINGS['email'], CONFLUENCE_SETTINGS['api_token']]):
    logger.warning("Confluence credentials are not fully configured. Page updates will fail.")
if not GITHUB_SETTINGS['token']:
    logger.warning("GitHub token is not set. Connections cannot register webhooks.")

# Log summary of key settings (without sensitive details)
logger.info(f"Confluence base URL: {CONFLUENCE_SETTINGS['base_url'] or 'Not configured'}")
logger.info(f"Public webhook URL: {GITHUB_SETTINGS['webhook_url'] or 'Not configured'}")
logger.info(f"Mappings file: {MAPPINGS_PATH}")
