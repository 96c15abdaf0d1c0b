"""
Catalog constants — vehicle metaobject type and field keys.
"""

METAOBJECT_TYPE: str = "vehicle"

# Shopify caps `first` at 250 for metaobject connections
PAGE_SIZE: int = 250

# Pagination safety bound (PAGE_SIZE * MAX_PAGES vehicles at most)
MAX_PAGES: int = 10

# Metaobject field keys
FIELD_CATEGORY: str = "type"
FIELD_YEAR: str = "year"
FIELD_MAKE: str = "make"
FIELD_MODEL: str = "model"
FIELD_STYLE: str = "style"
FIELD_VEHICLE_ID: str = "vehicle_id"

# Metaobject definition created by the importer
VEHICLE_DEFINITION: dict = {
    "name": "Vehicle",
    "type": METAOBJECT_TYPE,
    "fieldDefinitions": [
        {"key": FIELD_CATEGORY, "name": "Vehicle Type", "type": "single_line_text_field", "required": True},
        {"key": FIELD_YEAR, "name": "Year", "type": "number_integer", "required": True},
        {"key": FIELD_MAKE, "name": "Make", "type": "single_line_text_field", "required": True},
        {"key": FIELD_MODEL, "name": "Model", "type": "single_line_text_field", "required": True},
        {"key": FIELD_STYLE, "name": "Style", "type": "single_line_text_field", "required": False},
        {"key": FIELD_VEHICLE_ID, "name": "Vehicle ID", "type": "single_line_text_field", "required": True},
    ],
    "access": {"storefront": "PUBLIC_READ"},
}
