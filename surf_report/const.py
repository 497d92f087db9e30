"""Constants for Surf Report (scoring curves, tiers, trend blocks, providers)."""

# Open-Meteo endpoints
OM_BASE = "https://api.open-meteo.com/v1/forecast"
OM_MARINE_BASE = "https://marine-api.open-meteo.com/v1/marine"

# MET Norway locationforecast (requires an identifying User-Agent)
MET_NO_BASE = "https://api.met.no/weatherapi/locationforecast/2.0/compact"
MET_NO_USER_AGENT = "SurfReport/1.0 (+https://github.com/surf-report/surf-report)"

# Per-request timeout (seconds) used by the bundled provider adapters
PROVIDER_REQUEST_TIMEOUT = 10

# Forecast days requested from providers that return hourly arrays
PROVIDER_FORECAST_DAYS = 2

# Conditions cache default TTL (seconds)
CONDITIONS_CACHE_TTL = 600

# ----- Compass -----
COMPASS_POINTS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")

# One-hop neighbours on the 8-point compass wheel
COMPASS_NEIGHBOURS = {
    "N": ("NE", "NW"),
    "NE": ("N", "E"),
    "E": ("NE", "SE"),
    "SE": ("E", "S"),
    "S": ("SE", "SW"),
    "SW": ("S", "W"),
    "W": ("SW", "NW"),
    "NW": ("N", "W"),
}

# Cloud cover percent -> label (upper bound exclusive)
CLOUD_COVER_LABELS = (
    (25, "Clear"),
    (50, "Partly cloudy"),
    (75, "Cloudy"),
    (101, "Overcast"),
)

# ----- Aggregation -----
SWELL_CAP_MULTIPLIER = 1.4  # beach-break face height vs. groundswell height
WAVE_RANGE_HALF_WIDTH_M = 0.1

# ----- Scoring -----
FACTOR_WAVE_HEIGHT = "wave_height"
FACTOR_WAVE_PERIOD = "wave_period"
FACTOR_SWELL_QUALITY = "swell_quality"
FACTOR_WIND_SPEED = "wind_speed"
FACTOR_WIND_DIRECTION = "wind_direction"
FACTOR_WAVE_DIRECTION = "wave_direction"
FACTOR_CONFIDENCE = "confidence"

# Period + swell quality outweigh raw height; confidence stays small but nonzero.
FACTOR_WEIGHTS = {
    FACTOR_WAVE_HEIGHT: 0.20,
    FACTOR_WAVE_PERIOD: 0.20,
    FACTOR_SWELL_QUALITY: 0.15,
    FACTOR_WIND_SPEED: 0.15,
    FACTOR_WIND_DIRECTION: 0.15,
    FACTOR_WAVE_DIRECTION: 0.10,
    FACTOR_CONFIDENCE: 0.05,
}

FLAT_THRESHOLD_M = 0.1

# Wave height curve
HEIGHT_BAND_FLOOR = 90.0  # score at band min and band max
HEIGHT_BELOW_MIN_EXPONENT = 1.5
HEIGHT_OVERSIZE_SLOPE = 90.0  # points lost per band-max multiple above max

# Wave period curve
PERIOD_AT_MIN = 40.0
PERIOD_AT_MAX = 90.0
PERIOD_PLATEAU_FLOOR = 85.0
PERIOD_BELOW_MIN_EXPONENT = 1.5

# Swell quality
SWELL_BASE_SCORE = 50.0
SWELL_GOOD_HEIGHT_M = (0.5, 3.0)
SWELL_TINY_HEIGHT_M = 0.3

# Wind speed bands, km/h: (upper bound, score at upper bound)
WIND_LIGHT_KMH = 10.0
WIND_MODERATE_KMH = 20.0
WIND_STRONG_KMH = 30.0
WIND_SCORE_AT_MODERATE = 75.0
WIND_SCORE_AT_STRONG = 35.0
WIND_BLOWN_OUT_SLOPE = 5.0
WIND_SPEED_UNKNOWN_SCORE = 50.0

# Gust penalties: (ratio threshold, penalty), checked highest first
GUST_RATIO_PENALTIES = ((2.0, 20.0), (1.5, 12.0), (1.3, 6.0))
# Absolute gust penalties, km/h
GUST_ABSOLUTE_PENALTIES = ((45.0, 15.0), (35.0, 8.0), (25.0, 3.0))

# Direction scoring
DIRECTION_MATCH_SCORE = 100.0
DIRECTION_ADJACENT_SCORE = 65.0
DIRECTION_OTHER_SCORE = 25.0
DIRECTION_UNKNOWN_SCORE = 40.0

# Confidence by number of corroborating sources (>= 5 is capped)
CONFIDENCE_BY_SOURCES = {0: 0.0, 1: 40.0, 2: 60.0, 3: 75.0, 4: 90.0}
CONFIDENCE_MAX_SOURCES = 5
CONFIDENCE_MAX = 100.0

# Rating tiers: (minimum overall score, label), highest first
RATING_TIERS = (
    (85, "EPIC"),
    (70, "GOOD"),
    (60, "FAIR_TO_GOOD"),
    (50, "FAIR"),
    (40, "POOR_TO_FAIR"),
    (30, "POOR"),
    (0, "FLAT"),
)

# ----- Trend -----
# (label, day offset from today, start hour, end hour); end hour exclusive
TREND_BLOCKS = (
    ("This morning", 0, 6, 11),
    ("Midday", 0, 11, 14),
    ("This afternoon", 0, 14, 18),
    ("This evening", 0, 18, 21),
    ("Tomorrow morning", 1, 6, 11),
    ("Tomorrow midday", 1, 11, 14),
    ("Tomorrow afternoon", 1, 14, 18),
    ("Tomorrow evening", 1, 18, 21),
)
TREND_MIN_ENTRIES = 3
TREND_THRESHOLD = 8.0
TREND_SOURCE_COUNT = 3

TREND_IMPROVING = "improving"
TREND_DECLINING = "declining"
TREND_STABLE = "stable"

# ----- Feedback -----
MULTIPLIER_RANGE = (0.2, 2.5)
DEFAULT_MULTIPLIER = 1.0
# factors a feedback multiplier may adjust; confidence always keeps 1.0
ADJUSTABLE_FACTORS = (
    FACTOR_WAVE_HEIGHT,
    FACTOR_WAVE_PERIOD,
    FACTOR_SWELL_QUALITY,
    FACTOR_WIND_SPEED,
    FACTOR_WIND_DIRECTION,
    FACTOR_WAVE_DIRECTION,
)
