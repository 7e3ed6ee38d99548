import os
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

class Config:
    """
    Configuration class for LiveBus Routing.
    This class loads configuration values from environment variables or uses default values.
    """
    # General configuration
    DEBUG = os.environ.get('DEBUG', 'False') == 'True'

    # Timezone used for ETA clock labels
    TIMEZONE = os.environ.get('TIMEZONE', 'America/New_York')

    # Live bus network provider
    BUS_API_URL = os.environ.get('BUS_API_URL', 'https://content.osu.edu/v2/bus')
    ROUTE_IDS = [
        route_id.strip()
        for route_id in os.environ.get('ROUTE_IDS', 'BE,CC,CLS,ER,MC,MWC,WMC').split(',')
        if route_id.strip()
    ]

    # Walking directions provider (OpenRouteService)
    ORS_URL = os.environ.get('ORS_URL', 'https://api.openrouteservice.org/v2/directions/foot-walking/json')
    ORS_API_KEY = os.environ.get('ORS_API_KEY', '')

    # Planning policy
    WALK_RADIUS_METERS = float(os.environ.get('WALK_RADIUS_METERS', 400))
    WALKING_SPEED_MPS = float(os.environ.get('WALKING_SPEED_MPS', 1.1))
    TIME_SIMILARITY_THRESHOLD_MINUTES = float(os.environ.get('TIME_SIMILARITY_THRESHOLD_MINUTES', 1.0))

    # Fetching
    REFRESH_INTERVAL_SECONDS = float(os.environ.get('REFRESH_INTERVAL_SECONDS', 15))
    REQUEST_TIMEOUT_SECONDS = float(os.environ.get('REQUEST_TIMEOUT_SECONDS', 10))
    MAX_PARALLEL_REQUESTS = int(os.environ.get('MAX_PARALLEL_REQUESTS', 8))
