"""Constants for the Uddevalla Energi pickup schedule integration."""
from datetime import timedelta

DOMAIN = "uddevalla_energi"
NAME = "Uddevalla Energi"

# Configuration / storage keys
CONF_ADDRESS = "streetaddress"
CONF_PLANT_NUMBER = "plantnumber"
KEY_MATAVFALL = "matavfall"
KEY_RESTAVFALL = "restavfall"

# API Configuration
API_BASE_URL = "https://app.uddevallaenergi.se/wp-json/app/v1"
API_ADDRESS_URL = f"{API_BASE_URL}/address"
API_NEXT_PICKUP_URL = f"{API_BASE_URL}/next-pickup-web"
API_TIMEOUT = 30  # seconds

# Plant number sentinels
PLANT_NUMBER_UNKNOWN = 0
PLANT_NUMBER_ERROR = -1

# Schedule
UPDATE_INTERVAL = timedelta(hours=12)
PICKUP_HOUR = 6  # pickups happen from 06:00 local time
CONDITION_SECONDS = (0, 1)  # re-evaluate at 06:00:00 and 06:00:01
IMMINENT_WINDOW_MS = 86400000  # 24h * 60m * 60s * 1000 ms

# Storage
STORAGE_VERSION = 1

# Automation trigger
EVENT_NEW_DATES_FOR_PICKUP = f"{DOMAIN}_new_dates_for_pickup"
SERVICE_REFRESH = "refresh"

# Notification keys and English fallbacks
NOTIFY_NO_STREET_ADDRESS = "no_street_address"
NOTIFY_NO_PLANT = "no_plant"
NOTIFY_FETCH_PLANT_ERROR = "fetch_plant_error"
NOTIFY_NEXT_DATE_IN_PAST = "next_date_in_past"

NOTIFICATION_MESSAGES = {
    NOTIFY_NO_STREET_ADDRESS: "No valid street address configured, please review the integration options.",
    NOTIFY_NO_PLANT: "Could not find a plant number for the address {address}.",
    NOTIFY_FETCH_PLANT_ERROR: "Error while fetching plant number: {error}",
    NOTIFY_NEXT_DATE_IN_PAST: "The date for the next pickup has passed. The schedule could not be updated.",
}
