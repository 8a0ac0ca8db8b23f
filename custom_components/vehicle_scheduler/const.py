"""Constants for the Vehicle Command Scheduler integration."""

DOMAIN = "vehicle_scheduler"

# Configuration Keys - vehicle entities
CONF_VEHICLE_NAME = "vehicle_name"
CONF_BATTERY_SENSOR = "battery_level_sensor_entity_id"
CONF_RANGE_SENSOR = "range_sensor_entity_id"
CONF_CHARGING_STATE_SENSOR = "charging_state_sensor_entity_id"
CONF_PILOT_CURRENT_SENSOR = "pilot_current_sensor_entity_id"
CONF_CHARGE_LIMIT_NUMBER = "charge_limit_number_entity_id"
CONF_CHARGE_SWITCH = "charge_switch_entity_id"
CONF_CLIMATE_ENTITY = "climate_entity_id"
CONF_WAKE_BUTTON = "wake_button_entity_id"

# Configuration Keys - safety policy
CONF_REQUIRE_MIN_CHARGE = "require_min_charge"
CONF_MIN_CHARGE_THRESHOLD = "min_charge_threshold_percent"
CONF_REQUIRE_PLUGGED_IN = "require_plugged_in"
CONF_SAFE_MODE_COMMANDS = "safe_mode_commands"

# Configuration Keys - preferences
CONF_TEMPERATURE_UNIT = "temperature_unit"
CONF_NOTIFY_SERVICE = "notify_service"

# Defaults
DEFAULT_NAME = "Vehicle Command Scheduler"
DEFAULT_VEHICLE_NAME = "Vehicle"
DEFAULT_REQUIRE_MIN_CHARGE = False
DEFAULT_MIN_CHARGE_THRESHOLD = 25
DEFAULT_REQUIRE_PLUGGED_IN = False
DEFAULT_SAFE_MODE_COMMANDS = ["hvac_on"]

TEMP_UNIT_FAHRENHEIT = "F"
TEMP_UNIT_CELSIUS = "C"

# Wake polling
WAKE_MAX_ATTEMPTS = 20
WAKE_RETRY_DELAY_SECONDS = 5.0

# Outcome explanations
EXPLANATION_ALREADY_SET = "already_set"

# Activity log storage
STORAGE_KEY = f"{DOMAIN}.activity_log"
STORAGE_VERSION = 1
STORAGE_SAVE_DELAY_SECONDS = 10
ACTIVITY_ATTRIBUTE_ENTRIES = 20

# Services
SERVICE_RUN_COMMAND = "run_command"
ATTR_COMMAND = "command"
ATTR_VALUE = "value"
ATTR_TARGET = "target"
ATTR_ADDRESS = "address"
ATTR_SUBJECT = "subject"
ATTR_MESSAGE = "message"

# Events and signals
EVENT_ACTIVITY = f"{DOMAIN}_activity"
SIGNAL_UPDATE = f"{DOMAIN}_update"
