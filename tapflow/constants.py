MISSING_PAYMENT_ID = "N/A"
DEFAULT_CONFIG_FILE = "tapflow.yaml"
