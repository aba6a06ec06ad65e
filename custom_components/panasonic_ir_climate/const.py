# const.py
"""Constants for the Panasonic IR Climate integration."""

DOMAIN = "panasonic_ir_climate"
DEFAULT_FRIENDLY_NAME = "Panasonic IR Climate"

CONF_LOCAL_KEY = "local_key"
CONF_PROTOCOL_VERSION = "protocol_version"
CONF_CLIMATE_MODEL = "climate_model"

TUYA_VERSIONS = [3.3, 3.4, 3.5, 3.2, 3.1]

CLIMATE_BRAND = "panasonic"
DEFAULT_MODEL = "dke"

# Desteklenen kumanda modelleri
SUPPORTED_MODELS = {
    "dke": "DKE (A75C3747, horizontal swing)",
    "jke": "JKE",
    "lke": "LKE",
    "nke": "NKE",
}

# Tuya IR codes pack every duration into 16 bits
TUYA_MAX_PULSE = 0xFFFF
