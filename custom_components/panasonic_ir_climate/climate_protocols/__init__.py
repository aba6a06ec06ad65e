"""Climate IR protocols."""
from .panasonic_ac import PanasonicProtocol
from .schemas import PROTOCOL_OPTIONS_SCHEMA

PROTOCOL_MAP = {'panasonic': PanasonicProtocol}

def get_protocol(brand, **options):
    if brand in PROTOCOL_MAP:
        return PROTOCOL_MAP[brand](**PROTOCOL_OPTIONS_SCHEMA(options))
    raise ValueError(f"Unsupported climate brand: {brand}")

def get_supported_brands():
    return list(PROTOCOL_MAP.keys())
