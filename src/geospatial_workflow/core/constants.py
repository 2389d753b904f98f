"""
Application-wide constants for the geospatial workflow.
"""

# Shapefile (dBASE) field names are limited to 10 characters
SHAPEFILE_MAX_FIELD_LENGTH = 10

# Coordinates returned by the API are WGS84 longitude/latitude
DEFAULT_CRS = "EPSG:4326"

DEFAULT_OUTPUT_DRIVER = "ESRI Shapefile"
DEFAULT_OUTPUT_PATH = "output/measures.shp"
DEFAULT_LOG_FILE = "logs/geospatial_workflow.log"

# Response envelope keys
DATA_KEY = "data"
MEASURES_KEY = "geospatialMeasures"
ERRORS_KEY = "errors"

# Measure record keys
UNIT_KEY = "unit"
VALUE_KEY = "value"
KIND_KEY = "kind"
LOCATION_KEY = "location"
DATAPOINTS_KEY = "datapoints"
DATE_KEY = "date"
CENTROID_KEY = "centroid"
SHAPE_KEY = "shape"

# Column names used by the writer
LONGITUDE_COLUMN = "longitude"
LATITUDE_COLUMN = "latitude"
DATE_COLUMN = "date"
GEOMETRY_COLUMN = "geometry"

# Header carrying the API subscription key
API_KEY_HEADER = "Ocp-Apim-Subscription-Key"
