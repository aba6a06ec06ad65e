"""Schemas for climate protocol options."""
import voluptuous as vol

CONF_MODEL = "model"
CONF_REPEAT = "repeat"

PANASONIC_MODELS = ["dke", "jke", "lke", "nke"]

PROTOCOL_OPTIONS_SCHEMA = vol.Schema({
    vol.Optional(CONF_MODEL, default="dke"): vol.All(vol.Lower, vol.In(PANASONIC_MODELS)),
    vol.Optional(CONF_REPEAT, default=0): vol.All(vol.Coerce(int), vol.Range(min=0, max=3)),
})
