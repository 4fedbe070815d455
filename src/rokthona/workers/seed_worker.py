import logging
import os
import sys

from rokthona.core.config import get_settings
from rokthona.core.dependencies import get_data_access
from rokthona.services.geo_service import GeoService

# We need to configure logging here since workers are entry points
from rokthona.core.logging_config import configure_logging
configure_logging(os.getenv("LOG_LEVEL", "INFO"))

logger = logging.getLogger(__name__)

def lambda_handler(event, context):
    """Load district and upazila seed files. ``event["dataDir"]`` overrides SEED_DATA_DIR."""
    data_dir = (event or {}).get("dataDir") or get_settings().SEED_DATA_DIR
    logger.info(f"Seeding geography data from {data_dir}")

    try:
        result = GeoService(get_data_access()).seed(data_dir)
    except Exception as e:
        logger.error(f"Seeding from {data_dir} failed: {e}")
        raise e

    return {'statusCode': 200, 'body': result}

if __name__ == "__main__":
    lambda_handler({"dataDir": sys.argv[1] if len(sys.argv) > 1 else None}, None)
